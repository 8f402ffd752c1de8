from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Tuple
import math
import numpy as np

from .core_models import RetentionPolynomial, LinearPolynomial, BilinearPolynomial, TrilinearPolynomial
from .errors import ArrayLengthMismatch, InvalidParameter
from .variables import ABSOLUTE_ZERO_C, VariableType, coerce_variable_type

__all__ = ["ParameterSet", "ExperimentalData"]


def _check_number(name, value, *, minimum=0.0, inclusive=False):
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidParameter(name, value, "must be a number")
    if not math.isfinite(float(value)):
        raise InvalidParameter(name, value, "must be finite")
    if inclusive and value < minimum:
        raise InvalidParameter(name, value, f"must be >= {minimum}")
    if not inclusive and value <= minimum:
        raise InvalidParameter(name, value, f"must be > {minimum}")
    return float(value)


def _per_component(name, values, n, default):
    if values is None:
        return np.full(n, default, dtype=float)
    arr = np.atleast_1d(np.asarray(values, dtype=float))
    if arr.size != n:
        raise ArrayLengthMismatch(name, n, arr.size)
    return arr


@dataclass(frozen=True, eq=False)
class ParameterSet:
    """Column/method configuration plus per-component calibration.

    Read-only for the duration of an engine call; build a new one (see
    ``replace``) to change anything. The active polynomial variant fixes the
    number of variables and the number of components.
    """
    polynomial: RetentionPolynomial

    # column & method
    column_length: float = 25.0
    column_diameter: float = 0.46
    particle_diameter: float = 5.0
    flow_rate: float = 1.0
    flow_rate_reference: float = 1.0
    dead_time_experimental: float = 0.0
    plate_number: int = 32000

    # axes
    variable_type_x: VariableType = VariableType.GRADIENT_TIME
    variable_type_y: VariableType = VariableType.TEMPERATURE
    variable_type_z: VariableType = VariableType.PERCENT_B
    x_min: float = 30.0
    x_max: float = 90.0
    y_min: float = 30.0
    y_max: float = 60.0
    z_min: float = 0.0
    z_max: float = 100.0

    # component data
    pka: Optional[np.ndarray] = None
    intensities: Optional[np.ndarray] = None

    def __post_init__(self):
        if not isinstance(self.polynomial, (LinearPolynomial, BilinearPolynomial, TrilinearPolynomial)):
            raise InvalidParameter("polynomial", type(self.polynomial).__name__,
                                   "must be a retention polynomial")
        n = self.polynomial.n_components
        if n <= 0:
            raise InvalidParameter("number_of_components", n, "must be > 0")

        for name in ("column_length", "column_diameter", "particle_diameter",
                     "flow_rate", "flow_rate_reference"):
            object.__setattr__(self, name, _check_number(name, getattr(self, name)))
        object.__setattr__(self, "dead_time_experimental",
                           _check_number("dead_time_experimental", self.dead_time_experimental,
                                         inclusive=True))

        plates = self.plate_number
        if isinstance(plates, bool) or not isinstance(plates, (int, np.integer)) or plates <= 0:
            raise InvalidParameter("plate_number", plates, "must be a positive integer")
        object.__setattr__(self, "plate_number", int(plates))

        for axis in "xyz":
            name = f"variable_type_{axis}"
            object.__setattr__(self, name, coerce_variable_type(getattr(self, name)))
            lo = _check_number(f"{axis}_min", getattr(self, f"{axis}_min"), minimum=-math.inf)
            hi = _check_number(f"{axis}_max", getattr(self, f"{axis}_max"), minimum=-math.inf)
            if not lo < hi:
                raise InvalidParameter(f"{axis}_max", hi, f"must be greater than {axis}_min={lo}")
            if getattr(self, name) is VariableType.TEMPERATURE and lo <= -ABSOLUTE_ZERO_C:
                raise InvalidParameter(f"{axis}_min", lo, f"must be above -{ABSOLUTE_ZERO_C} °C")
            object.__setattr__(self, f"{axis}_min", lo)
            object.__setattr__(self, f"{axis}_max", hi)

        if self.pka is None and VariableType.PH in self.variable_types[:self.number_of_variables]:
            raise InvalidParameter("pka", None, "is required when an active axis is pH")
        object.__setattr__(self, "pka", _per_component("pka", self.pka, n, 0.0))
        object.__setattr__(self, "intensities", _per_component("intensities", self.intensities, n, 1.0))

    @property
    def number_of_variables(self) -> int:
        return self.polynomial.dimensionality

    @property
    def number_of_components(self) -> int:
        return self.polynomial.n_components

    @property
    def variable_types(self) -> Tuple[VariableType, VariableType, VariableType]:
        return (self.variable_type_x, self.variable_type_y, self.variable_type_z)

    @property
    def bounds(self) -> Tuple[Tuple[float, float], ...]:
        """(min, max) of the active axes only."""
        all_bounds = ((self.x_min, self.x_max), (self.y_min, self.y_max), (self.z_min, self.z_max))
        return all_bounds[:self.number_of_variables]

    def replace(self, **changes) -> "ParameterSet":
        return replace(self, **changes)


@dataclass(frozen=True, eq=False)
class ExperimentalData:
    """Retention times of the component set measured at one (x, y, z) point."""
    retention_times: np.ndarray
    x: float
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self):
        times = np.atleast_1d(np.asarray(self.retention_times, dtype=float)).copy()
        times.setflags(write=False)
        object.__setattr__(self, "retention_times", times)

    @property
    def point(self) -> Tuple[float, float, float]:
        return (float(self.x), float(self.y), float(self.z))
