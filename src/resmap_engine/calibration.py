from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import logging
import numpy as np

from .core_models import BilinearPolynomial, LinearPolynomial, TrilinearPolynomial
from .errors import ArrayLengthMismatch, DegenerateFit, InvalidParameter
from .parameters import ExperimentalData
from .variables import coerce_variable_type, transform_variable

logger = logging.getLogger(__name__)

__all__ = [
    "LinearFit", "fit_linear", "fit_bilinear", "fit_trilinear",
    "log_retention_factors", "calibrate_from_experiments",
]


@dataclass(frozen=True, eq=False)
class LinearFit:
    a: np.ndarray
    b: np.ndarray


def _as_vector(name, values, n=None):
    arr = np.atleast_1d(np.asarray(values, dtype=float))
    if n is not None and arr.size != n:
        raise ArrayLengthMismatch(name, n, arr.size)
    return arr


def fit_linear(variable_type, range1, range2, values1, values2, pka=None) -> LinearFit:
    """Two-point line through (t(range1), values1) and (t(range2), values2).

    t() is the variable transform of ``variable_type``, evaluated per component
    so a pH axis uses each component's own pKa.
    """
    v1 = _as_vector("values1", values1)
    n = v1.size
    v2 = _as_vector("values2", values2, n)
    if pka is not None:
        pka = _as_vector("pka", pka, n)
    vtype = coerce_variable_type(variable_type)

    t1 = np.broadcast_to(np.asarray(transform_variable(range1, vtype, pka), dtype=float), (n,))
    t2 = np.broadcast_to(np.asarray(transform_variable(range2, vtype, pka), dtype=float), (n,))
    denom = t1 - t2
    collapsed = np.flatnonzero(denom == 0)
    if collapsed.size:
        i = int(collapsed[0])
        raise DegenerateFit(i, float(t1[i]))

    a = (v1 - v2) / denom
    b = v1 - a * t1
    return LinearFit(a=a, b=b)


def fit_bilinear(x_type, y_type, x_range, y_range, values, pka=None) -> BilinearPolynomial:
    """Corner values ordered (x1,y1), (x2,y1), (x1,y2), (x2,y2)."""
    if len(values) != 4:
        raise ArrayLengthMismatch("values", 4, len(values))
    (x1, x2), (y1, y2) = x_range, y_range
    at_y1 = fit_linear(x_type, x1, x2, values[0], values[1], pka)
    at_y2 = fit_linear(x_type, x1, x2, values[2], values[3], pka)
    slope = fit_linear(y_type, y1, y2, at_y1.a, at_y2.a, pka)
    icept = fit_linear(y_type, y1, y2, at_y1.b, at_y2.b, pka)
    return BilinearPolynomial(aa=slope.a, ab=slope.b, ba=icept.a, b=icept.b)


def fit_trilinear(x_type, y_type, z_type, x_range, y_range, z_range, values, pka=None) -> TrilinearPolynomial:
    """Two bilinear faces (z1 then z2, four corners each) joined along z."""
    if len(values) != 8:
        raise ArrayLengthMismatch("values", 8, len(values))
    z1, z2 = z_range
    lo = fit_bilinear(x_type, y_type, x_range, y_range, values[:4], pka)
    hi = fit_bilinear(x_type, y_type, x_range, y_range, values[4:], pka)

    def along_z(name):
        return fit_linear(z_type, z1, z2, getattr(lo, name), getattr(hi, name), pka)

    aa, ab, ba, b = along_z("aa"), along_z("ab"), along_z("ba"), along_z("b")
    return TrilinearPolynomial(
        aaa=aa.a, aab=aa.b,
        baa=ab.a, bab=ab.b,
        aba=ba.a, abb=ba.b,
        bba=b.a, b=b.b,
    )


def log_retention_factors(retention_times, dead_time: float) -> np.ndarray:
    """ln k from measured retention times, k = (tR - t0) / t0."""
    if not dead_time > 0:
        raise InvalidParameter("dead_time", dead_time, "must be > 0")
    t_r = _as_vector("retention_times", retention_times)
    k = (t_r - dead_time) / dead_time
    if np.any(k <= 0):
        bad = int(np.flatnonzero(k <= 0)[0])
        raise InvalidParameter(f"retention_times[{bad}]", float(t_r[bad]),
                               f"must exceed the dead time {dead_time}")
    return np.log(k)


_CORNERS_BY_DIM = {2: 1, 4: 2, 8: 3}


def calibrate_from_experiments(experiments: Sequence[ExperimentalData], dead_time: float,
                               variable_types, pka=None):
    """Fit the retention polynomial from measurements at the corners of the domain.

    2, 4 or 8 experiments give a 1, 2 or 3 variable model; every active axis
    must take exactly two distinct values and each corner must be measured once.
    """
    dims = _CORNERS_BY_DIM.get(len(experiments))
    if dims is None:
        raise InvalidParameter("experiments", len(experiments),
                               "must hold 2, 4 or 8 corner measurements")

    n = experiments[0].retention_times.size
    for e in experiments[1:]:
        if e.retention_times.size != n:
            raise ArrayLengthMismatch("retention_times", n, e.retention_times.size)

    points = np.array([e.point for e in experiments])[:, :dims]
    ranges = []
    for axis in range(dims):
        levels = np.unique(points[:, axis])
        if levels.size != 2:
            raise InvalidParameter(f"experiments[{'xyz'[axis]}]", levels.tolist(),
                                   "must take exactly two distinct values")
        ranges.append((float(levels[0]), float(levels[1])))

    corners = [None] * len(experiments)
    for e, p in zip(experiments, points):
        idx = sum(int(p[axis] == ranges[axis][1]) << axis for axis in range(dims))
        if corners[idx] is not None:
            raise InvalidParameter("experiments", e.point, "measures the same corner twice")
        corners[idx] = log_retention_factors(e.retention_times, dead_time)

    types = [coerce_variable_type(t) for t in variable_types]
    logger.debug("calibrating %d-variable model for %d components", dims, n)
    if dims == 1:
        fit = fit_linear(types[0], ranges[0][0], ranges[0][1], corners[0], corners[1], pka)
        return LinearPolynomial(a=fit.a, b=fit.b)
    if dims == 2:
        return fit_bilinear(types[0], types[1], ranges[0], ranges[1], corners, pka)
    return fit_trilinear(types[0], types[1], types[2], ranges[0], ranges[1], ranges[2], corners, pka)
