from __future__ import annotations
from dataclasses import dataclass
import math

from .constants import INTERSTITIAL_POROSITY
from .errors import InvalidParameter

__all__ = ["ColumnPhysics", "compute_column_physics"]


@dataclass(frozen=True)
class ColumnPhysics:
    mobile_phase_volume: float
    dead_time: float
    linear_velocity: float


def compute_column_physics(column_length, column_diameter, flow_rate) -> ColumnPhysics:
    """Mobile-phase volume, hold-up time and linear velocity of a packed column.

    Units follow the inputs: cm and mL/min give mL, min and cm/min.
    """
    for name, value in (("column_length", column_length),
                        ("column_diameter", column_diameter),
                        ("flow_rate", flow_rate)):
        if value is None or not value > 0 or not math.isfinite(value):
            raise InvalidParameter(name, value, "must be > 0")

    radius = column_diameter / 2.0
    v_m = math.pi * radius * radius * column_length * INTERSTITIAL_POROSITY
    t0 = v_m / flow_rate
    u = column_length / t0
    return ColumnPhysics(mobile_phase_volume=v_m, dead_time=t0, linear_velocity=u)
