from __future__ import annotations
from dataclasses import dataclass, fields
from typing import ClassVar, Optional, Tuple, Union
import numpy as np

from .constants import LOG_MAX_RETENTION_FACTOR, MAX_RETENTION_FACTOR, PEAK_WIDTH_DIVISOR
from .errors import ArrayLengthMismatch
from .variables import transform_variable

__all__ = [
    "LinearPolynomial", "BilinearPolynomial", "TrilinearPolynomial",
    "RetentionPolynomial", "RetentionResult", "CalculationResults",
    "retention_from_log_k", "compute_retention_factors", "compute_retention",
]


# ---------- Retention polynomials (one variant per dimensionality) ----------
class _Polynomial:
    """Shared plumbing: coerce coefficient arrays and check they line up."""

    dimensionality: ClassVar[int] = 0

    def __post_init__(self):
        n = None
        for f in fields(self):
            arr = np.atleast_1d(np.asarray(getattr(self, f.name), dtype=float))
            object.__setattr__(self, f.name, arr)
            if n is None:
                n = arr.size
            elif arr.size != n:
                raise ArrayLengthMismatch(f.name, n, arr.size)

    @property
    def n_components(self) -> int:
        return int(getattr(self, fields(self)[0].name).size)

    def coefficients(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True, eq=False)
class LinearPolynomial(_Polynomial):
    """ln k = a*x' + b."""
    a: np.ndarray
    b: np.ndarray

    dimensionality: ClassVar[int] = 1

    def evaluate(self, x, y=0.0, z=0.0):
        return self.a * x + self.b


@dataclass(frozen=True, eq=False)
class BilinearPolynomial(_Polynomial):
    """ln k = (aa*y' + ab)*x' + ba*y' + b."""
    aa: np.ndarray
    ab: np.ndarray
    ba: np.ndarray
    b: np.ndarray

    dimensionality: ClassVar[int] = 2

    def evaluate(self, x, y, z=0.0):
        return (self.aa * y + self.ab) * x + self.ba * y + self.b


@dataclass(frozen=True, eq=False)
class TrilinearPolynomial(_Polynomial):
    """Nested trilinear form; every 2-variable coefficient gains a z slope.

    ln k = ((aaa*z' + aab)*y' + (baa*z' + bab))*x' + ((aba*z' + abb)*y' + (bba*z' + b))

    With aaa = baa = aba = bba = 0 this is the bilinear form with aa=aab,
    ab=bab and ba=abb.
    """
    aaa: np.ndarray
    aab: np.ndarray
    baa: np.ndarray
    bab: np.ndarray
    aba: np.ndarray
    abb: np.ndarray
    bba: np.ndarray
    b: np.ndarray

    dimensionality: ClassVar[int] = 3

    def evaluate(self, x, y, z):
        slope_x = (self.aaa * z + self.aab) * y + (self.baa * z + self.bab)
        rest = (self.aba * z + self.abb) * y + (self.bba * z + self.b)
        return slope_x * x + rest


RetentionPolynomial = Union[LinearPolynomial, BilinearPolynomial, TrilinearPolynomial]


# ---------- Results ----------
@dataclass(frozen=True, eq=False)
class RetentionResult:
    factors: np.ndarray
    times: np.ndarray
    widths: np.ndarray


@dataclass(frozen=True, eq=False)
class CalculationResults:
    """Snapshot of one evaluated operating point."""
    mobile_phase_volume: float
    dead_time: float
    linear_velocity: float
    retention_factors: np.ndarray
    retention_times: np.ndarray
    peak_widths: np.ndarray
    current_resolution: float
    critical_pair: Optional[Tuple[int, int]]
    current_point: Tuple[float, float, float]
    max_resolution: float = float("nan")
    min_resolution: float = float("nan")
    optimal_point: Optional[Tuple[float, float, float]] = None

    def to_dict(self) -> dict:
        return {
            "mobile_phase_volume": float(self.mobile_phase_volume),
            "dead_time": float(self.dead_time),
            "linear_velocity": float(self.linear_velocity),
            "retention_factors": [float(v) for v in self.retention_factors],
            "retention_times": [float(v) for v in self.retention_times],
            "peak_widths": [float(v) for v in self.peak_widths],
            "current_resolution": float(self.current_resolution),
            "critical_pair": list(self.critical_pair) if self.critical_pair else None,
            "current_point": list(self.current_point),
            "max_resolution": float(self.max_resolution),
            "min_resolution": float(self.min_resolution),
            "optimal_point": list(self.optimal_point) if self.optimal_point else None,
        }


# ---------- Retention model ----------
def retention_from_log_k(log_k, dead_time: float, plate_number: int) -> RetentionResult:
    """ln k -> (k, tR, sigma). ln k saturates at ln(1e32) instead of overflowing."""
    log_k = np.atleast_1d(np.asarray(log_k, dtype=float))
    saturated = log_k > LOG_MAX_RETENTION_FACTOR
    k = np.where(saturated, MAX_RETENTION_FACTOR,
                 np.exp(np.minimum(log_k, LOG_MAX_RETENTION_FACTOR)))
    t_r = dead_time * k + dead_time
    sigma = np.sqrt(2.0 / plate_number) * t_r / PEAK_WIDTH_DIVISOR
    return RetentionResult(factors=k, times=t_r, widths=sigma)


def compute_retention_factors(polynomial: RetentionPolynomial, variable_types, pka,
                              x, y, z, dead_time, plate_number) -> RetentionResult:
    """Evaluate a polynomial at one raw (x, y, z) point for all components."""
    dims = polynomial.dimensionality
    raw = (x, y, z)
    coords = [0.0, 0.0, 0.0]
    for axis in range(dims):
        coords[axis] = transform_variable(raw[axis], variable_types[axis], pka)
    log_k = polynomial.evaluate(*coords)
    return retention_from_log_k(log_k, dead_time, plate_number)


def compute_retention(params, x, y=0.0, z=0.0) -> RetentionResult:
    return compute_retention_factors(
        params.polynomial,
        params.variable_types,
        params.pka,
        x, y, z,
        params.dead_time_experimental,
        params.plate_number,
    )
