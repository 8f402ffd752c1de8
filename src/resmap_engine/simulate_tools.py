from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import math
import numpy as np
import pandas as pd

from .constants import RESOLUTION_BANDS, RESOLUTION_SCALE
from .errors import ArrayLengthMismatch, DegenerateResolution, InvalidParameter

__all__ = [
    "ResolutionScore", "pair_resolution", "score_resolution", "find_critical_pair",
    "resolution_table", "resolution_band", "elution_order",
    "gaussian_peak", "simulate_chromatogram",
]


@dataclass(frozen=True)
class ResolutionScore:
    resolution: float
    pair: Optional[Tuple[int, int]]


def pair_resolution(k1: float, k2: float, plate_number: int, pair=(0, 1)) -> float:
    """Legacy resolution of two peaks from their retention factors."""
    if k1 > k2:
        k1, k2 = k2, k1
    if k1 == 0:
        raise DegenerateResolution(tuple(pair))
    alpha = k2 / k1
    rs = (math.sqrt(plate_number) / 2.0) * (alpha - 1.0) * (k1 / (k1 + k2 + 2.0))
    return rs * RESOLUTION_SCALE


def find_critical_pair(retention_factors) -> Optional[Tuple[int, int]]:
    """Indices (i, j) of the two closest retention factors, k_i <= k_j.

    The smallest |k_i - k_j| over all pairs is always between neighbours in
    sorted order, so one sort replaces the O(n^2) pair scan. Ties resolve by
    value order, never by input position.
    """
    k = np.asarray(retention_factors, dtype=float).ravel()
    if k.size < 2:
        return None
    order = np.argsort(k, kind="stable")
    gaps = np.diff(k[order])
    j = int(np.argmin(gaps))
    return int(order[j]), int(order[j + 1])


def score_resolution(retention_factors, plate_number: int) -> ResolutionScore:
    """Resolution of the critical pair. Fewer than two components: R = inf."""
    pair = find_critical_pair(retention_factors)
    if pair is None:
        return ResolutionScore(resolution=float("inf"), pair=None)
    k = np.asarray(retention_factors, dtype=float).ravel()
    rs = pair_resolution(float(k[pair[0]]), float(k[pair[1]]), plate_number, pair=pair)
    return ResolutionScore(resolution=float(rs), pair=pair)


def resolution_table(retention_factors, plate_number: int, names: Optional[Sequence[str]] = None):
    """Resolution of every neighbouring pair in elution order, as a DataFrame."""
    k = np.asarray(retention_factors, dtype=float).ravel()
    if names is None:
        names = [str(i) for i in range(k.size)]
    elif len(names) != k.size:
        raise ArrayLengthMismatch("names", k.size, len(names))

    order = elution_order(k)
    rows = []
    for a, b in zip(order[:-1], order[1:]):
        rows.append({
            "pair": f"{names[a]} | {names[b]}",
            "k1": float(k[a]),
            "k2": float(k[b]),
            "Rs": pair_resolution(float(k[a]), float(k[b]), plate_number, pair=(int(a), int(b))),
        })
    return pd.DataFrame(rows, columns=["pair", "k1", "k2", "Rs"])


def resolution_band(resolution, delta_r: float, max_resolution: float):
    """Contour band of a resolution value below the map maximum.

    Band 1 holds values within ``delta_r`` of the maximum, band 2 the next
    ``delta_r`` and so on up to band 10; anything lower (or NaN) is band 0.
    Works element-wise on arrays.
    """
    if not delta_r > 0:
        raise InvalidParameter("delta_r", delta_r, "must be > 0")
    r = np.asarray(resolution, dtype=float)
    with np.errstate(invalid="ignore"):
        band = np.ceil((max_resolution - r) / delta_r)
        band = np.where(band < 1, 1, band)
        band = np.where((band > RESOLUTION_BANDS) | np.isnan(band), 0, band).astype(int)
    return int(band) if band.ndim == 0 else band


def elution_order(values) -> np.ndarray:
    """Component indices sorted by retention (stable)."""
    return np.argsort(np.asarray(values, dtype=float), kind="stable")


def gaussian_peak(time_points, retention_time: float, sigma: float, intensity: float = 1.0):
    if not sigma > 0:
        raise InvalidParameter("sigma", sigma, "must be > 0")
    t = np.asarray(time_points, dtype=float)
    norm = intensity / (sigma * math.sqrt(2.0 * math.pi))
    return norm * np.exp(-((t - retention_time) ** 2) / (2.0 * sigma * sigma))


def simulate_chromatogram(time_points, retention_times, peak_widths, intensities=None):
    """Sum of area-normalised Gaussian peaks on ``time_points``."""
    t_r = np.asarray(retention_times, dtype=float).ravel()
    sig = np.asarray(peak_widths, dtype=float).ravel()
    amp = np.ones_like(t_r) if intensities is None else np.asarray(intensities, dtype=float).ravel()
    if sig.size != t_r.size:
        raise ArrayLengthMismatch("peak_widths", t_r.size, sig.size)
    if amp.size != t_r.size:
        raise ArrayLengthMismatch("intensities", t_r.size, amp.size)

    y = np.zeros_like(np.asarray(time_points, dtype=float))
    for tr, s, a in zip(t_r, sig, amp):
        y += gaussian_peak(time_points, tr, s, a)
    return y
