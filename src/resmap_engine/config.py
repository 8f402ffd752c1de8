from dataclasses import dataclass, field, asdict
from typing import Optional

from .errors import InvalidParameter

OBJECTIVE_MODES = ("constraint_then_time", "weighted")


# ---------- Canonical grid & objective defaults (engine-wide) ----------
@dataclass(frozen=True)
class GridDefaults:
    x_steps: int = 41
    y_steps: int = 31
    z_steps: int = 5


@dataclass(frozen=True)
class ObjectiveDefaults:
    objective_mode: str = "constraint_then_time"
    target_Rs: float = 1.5
    alpha_time: float = 0.2


DEFAULT_GRID = GridDefaults()
DEFAULT_OBJECTIVE = ObjectiveDefaults()


@dataclass
class ScanSettings:
    x_steps: int = DEFAULT_GRID.x_steps
    y_steps: int = DEFAULT_GRID.y_steps
    z_steps: int = DEFAULT_GRID.z_steps

    # three-variable models: sweep z ("screen on z") or hold one slice
    screen_z: bool = False
    z_value: Optional[float] = None     # None -> middle of [z_min, z_max]

    objective_mode: str = DEFAULT_OBJECTIVE.objective_mode   # or "weighted"
    target_Rs: float = DEFAULT_OBJECTIVE.target_Rs
    alpha_time: float = DEFAULT_OBJECTIVE.alpha_time

    n_jobs: int = 1
    max_cells: int = field(default=250_000, repr=False)

    def validate(self) -> "ScanSettings":
        for name in ("x_steps", "y_steps", "z_steps"):
            steps = getattr(self, name)
            if isinstance(steps, bool) or not isinstance(steps, int) or steps < 2:
                raise InvalidParameter(name, steps, "must be an integer >= 2")
        cells = self.x_steps * self.y_steps * (self.z_steps if self.screen_z else 1)
        if cells > self.max_cells:
            raise InvalidParameter("grid", cells, f"exceeds max_cells={self.max_cells}")
        if self.objective_mode not in OBJECTIVE_MODES:
            raise InvalidParameter("objective_mode", self.objective_mode,
                                   f"must be one of {OBJECTIVE_MODES}")
        if not 0.0 <= self.alpha_time <= 1.0:
            raise InvalidParameter("alpha_time", self.alpha_time, "must lie in [0, 1]")
        if self.n_jobs == 0:
            raise InvalidParameter("n_jobs", self.n_jobs, "must not be 0")
        return self


def resolve_scan_settings(overrides: dict | None = None, base: ScanSettings | None = None) -> ScanSettings:
    """Merge request overrides onto engine defaults. Request > defaults."""
    base = base or ScanSettings()
    known = asdict(base)
    unknown = set(overrides or {}) - set(known)
    if unknown:
        raise InvalidParameter("scan_settings", sorted(unknown), "has unknown keys")
    merged = {**known, **{k: v for k, v in (overrides or {}).items() if v is not None}}
    return ScanSettings(**merged).validate()
