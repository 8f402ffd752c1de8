from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Tuple
import logging
import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .column import ColumnPhysics, compute_column_physics
from .config import ScanSettings
from .core_models import CalculationResults, compute_retention
from .errors import DegenerateResolution
from .grid_tools import build_axis, check_point
from .parameters import ParameterSet
from .simulate_tools import resolution_band, score_resolution

logger = logging.getLogger(__name__)

__all__ = ["evaluate_point", "ResolutionMap", "scan_grid", "select_optimum", "optimize"]


def _physics(params: ParameterSet) -> ColumnPhysics:
    return compute_column_physics(params.column_length, params.column_diameter, params.flow_rate)


def evaluate_point(params: ParameterSet, x, y=None, z=None,
                   physics: Optional[ColumnPhysics] = None) -> CalculationResults:
    """Column physics, retention and critical-pair resolution at one point."""
    x, y, z = check_point(params, x, y, z)
    physics = physics or _physics(params)
    ret = compute_retention(params, x, y, z)
    score = score_resolution(ret.factors, params.plate_number)
    return CalculationResults(
        mobile_phase_volume=physics.mobile_phase_volume,
        dead_time=physics.dead_time,
        linear_velocity=physics.linear_velocity,
        retention_factors=ret.factors,
        retention_times=ret.times,
        peak_widths=ret.widths,
        current_resolution=score.resolution,
        critical_pair=score.pair,
        current_point=(x, y, z),
    )


# ---------- Grid scan ----------
@dataclass(frozen=True, eq=False)
class ResolutionMap:
    """Resolution and analysis time over a (z, y, x) grid."""
    xs: np.ndarray
    ys: np.ndarray
    zs: np.ndarray
    resolution: np.ndarray      # shape (len(zs), len(ys), len(xs)); NaN = degenerate
    analysis_time: np.ndarray   # last retention time per cell
    optimal_index: Optional[Tuple[int, int, int]]
    degenerate_cells: int = 0

    @property
    def max_resolution(self) -> float:
        if np.isnan(self.resolution).all():
            return float("nan")
        return float(np.nanmax(self.resolution))

    @property
    def min_resolution(self) -> float:
        if np.isnan(self.resolution).all():
            return float("nan")
        return float(np.nanmin(self.resolution))

    @property
    def optimal_point(self) -> Optional[Tuple[float, float, float]]:
        if self.optimal_index is None:
            return None
        iz, iy, ix = self.optimal_index
        return (float(self.xs[ix]), float(self.ys[iy]), float(self.zs[iz]))

    @property
    def optimal_resolution(self) -> float:
        if self.optimal_index is None:
            return float("nan")
        return float(self.resolution[self.optimal_index])

    def bands(self, delta_r: float) -> np.ndarray:
        return resolution_band(self.resolution, delta_r, self.max_resolution)

    def to_frame(self) -> pd.DataFrame:
        zz, yy, xx = np.meshgrid(self.zs, self.ys, self.xs, indexing="ij")
        return pd.DataFrame({
            "x": xx.ravel(),
            "y": yy.ravel(),
            "z": zz.ravel(),
            "resolution": self.resolution.ravel(),
            "analysis_time": self.analysis_time.ravel(),
        })


def _scan_row(params: ParameterSet, xs, y, z):
    res = np.empty(len(xs))
    t_end = np.empty(len(xs))
    degenerate = 0
    for i, x in enumerate(xs):
        ret = compute_retention(params, x, y, z)
        t_end[i] = float(ret.times.max()) if ret.times.size else 0.0
        try:
            res[i] = score_resolution(ret.factors, params.plate_number).resolution
        except DegenerateResolution:
            res[i] = np.nan
            degenerate += 1
    return res, t_end, degenerate


def _axes(params: ParameterSet, settings: ScanSettings):
    dims = params.number_of_variables
    xs = build_axis(params.x_min, params.x_max, settings.x_steps)
    ys = build_axis(params.y_min, params.y_max, settings.y_steps) if dims >= 2 else np.zeros(1)
    if dims < 3:
        zs = np.zeros(1)
    elif settings.screen_z:
        zs = build_axis(params.z_min, params.z_max, settings.z_steps)
    else:
        z = settings.z_value if settings.z_value is not None else 0.5 * (params.z_min + params.z_max)
        _, _, z = check_point(params, params.x_min, params.y_min, z)
        zs = np.array([z])
    return xs, ys, zs


def select_optimum(resolution: np.ndarray, analysis_time: np.ndarray, settings: ScanSettings):
    """Flat index of the best cell, or None when every cell is degenerate.

    constraint_then_time: shortest analysis among cells reaching target_Rs,
    otherwise the highest resolution. weighted: minimise
    alpha*time + (1 - alpha)/Rs.
    """
    r = resolution.ravel()
    t = analysis_time.ravel()
    valid = ~np.isnan(r)
    if not valid.any():
        return None

    if settings.objective_mode == "constraint_then_time":
        feasible = valid & (np.where(valid, r, -np.inf) >= settings.target_Rs)
        if feasible.any():
            idx = np.flatnonzero(feasible)
            # shortest time first, higher resolution breaks ties
            best = np.lexsort((-r[idx], t[idx]))[0]
            return int(idx[best])
        return int(np.nanargmax(r))

    score = settings.alpha_time * t + (1.0 - settings.alpha_time) / np.maximum(r, 1e-6)
    score = np.where(valid, score, np.inf)
    return int(np.argmin(score))


def scan_grid(params: ParameterSet, settings: Optional[ScanSettings] = None) -> ResolutionMap:
    """Evaluate resolution over the domain grid.

    Each cell costs one retention evaluation plus a critical-pair search, so
    rows are independent and fanned out with joblib (``settings.n_jobs``).
    """
    settings = (settings or ScanSettings()).validate()
    xs, ys, zs = _axes(params, settings)
    logger.debug("scanning %d x %d x %d grid (%d components, n_jobs=%d)",
                 len(zs), len(ys), len(xs), params.number_of_components, settings.n_jobs)

    rows = Parallel(n_jobs=settings.n_jobs)(
        delayed(_scan_row)(params, xs, y, z) for z in zs for y in ys
    )
    resolution = np.array([r[0] for r in rows]).reshape(len(zs), len(ys), len(xs))
    analysis_time = np.array([r[1] for r in rows]).reshape(len(zs), len(ys), len(xs))
    degenerate = sum(r[2] for r in rows)
    if degenerate:
        logger.warning("%d grid cells have a zero retention factor in the critical pair", degenerate)

    flat = select_optimum(resolution, analysis_time, settings)
    optimal = None if flat is None else tuple(int(i) for i in np.unravel_index(flat, resolution.shape))
    return ResolutionMap(xs=xs, ys=ys, zs=zs, resolution=resolution, analysis_time=analysis_time,
                         optimal_index=optimal, degenerate_cells=degenerate)


def optimize(params: ParameterSet, settings: Optional[ScanSettings] = None):
    """Scan the grid and evaluate the optimum; returns (results, map)."""
    grid = scan_grid(params, settings)
    if grid.optimal_point is None:
        raise DegenerateResolution(None)
    x, y, z = grid.optimal_point
    best = evaluate_point(params, x, y, z)
    results = replace(best,
                      max_resolution=grid.max_resolution,
                      min_resolution=grid.min_resolution,
                      optimal_point=grid.optimal_point)
    return results, grid
