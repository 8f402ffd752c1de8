import numpy as np

from .errors import InvalidParameter

__all__ = ["clamp", "build_axis", "clamp_point", "check_point"]


def clamp(x, lo, hi):
    return max(lo, min(hi, x))


def build_axis(lo, hi, steps):
    """Evenly spaced grid over [lo, hi], both ends included."""
    if steps < 2:
        raise InvalidParameter("steps", steps, "must be >= 2")
    return np.linspace(float(lo), float(hi), int(steps))


def clamp_point(params, x, y=0.0, z=0.0):
    """Pull a point into the domain of the active axes."""
    point = [x, y, z]
    for axis, (lo, hi) in enumerate(params.bounds):
        point[axis] = clamp(float(point[axis]), lo, hi)
    return tuple(point)


def check_point(params, x, y=0.0, z=0.0):
    point = (x, y, z)
    for axis, (lo, hi) in enumerate(params.bounds):
        value = point[axis]
        if value is None:
            raise InvalidParameter("xyz"[axis], value, "is required for this model")
        if not lo <= value <= hi:
            raise InvalidParameter("xyz"[axis], value, f"must lie within [{lo}, {hi}]")
    return tuple(0.0 if v is None else float(v) for v in point)
