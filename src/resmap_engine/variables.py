from __future__ import annotations
from enum import IntEnum
import numpy as np

from .errors import InvalidParameter, InvalidVariableType

__all__ = [
    "VariableType", "coerce_variable_type", "transform_variable",
    "variable_type_from_name", "display_name", "ABSOLUTE_ZERO_C",
]

ABSOLUTE_ZERO_C = 273.15


class VariableType(IntEnum):
    TEMPERATURE = 1
    PH = 2
    GRADIENT_TIME = 3
    FLOW_RATE = 4
    IONIC_STRENGTH = 5
    GRADIENT_SLOPE = 6
    TEMPERATURE_GRADIENT_SLOPE = 7
    FLOW_RATE_GRADIENT_SLOPE = 8
    PERCENT_B = 9


_DISPLAY_NAMES = {
    VariableType.TEMPERATURE: "T(°C)",
    VariableType.PH: "pH",
    VariableType.GRADIENT_TIME: "tG(min)",
    VariableType.FLOW_RATE: "f-rate(ml/min)",
    VariableType.IONIC_STRENGTH: "ionic strength",
    VariableType.GRADIENT_SLOPE: "Gs(1/min)",
    VariableType.TEMPERATURE_GRADIENT_SLOPE: "TgS(°C/min)",
    VariableType.FLOW_RATE_GRADIENT_SLOPE: "f-rate-Gs(ml/min²)",
    VariableType.PERCENT_B: "%B",
}


def coerce_variable_type(value) -> VariableType:
    """Accept an enum member, its integer code, its name or a legacy label."""
    if isinstance(value, VariableType):
        return value
    if isinstance(value, str):
        try:
            return VariableType[value.strip().upper()]
        except KeyError:
            return variable_type_from_name(value)
    if isinstance(value, bool):
        raise InvalidVariableType(value)
    try:
        code = float(value)
    except (TypeError, ValueError):
        raise InvalidVariableType(value) from None
    if not code.is_integer():
        raise InvalidVariableType(value)
    try:
        return VariableType(int(code))
    except ValueError:
        raise InvalidVariableType(value) from None


def transform_variable(value, variable_type, pka=None):
    """Map a raw axis value onto the coordinate the retention polynomial uses.

    Temperature is taken in °C and turned into reciprocal absolute temperature.
    pH becomes 1 / (1 + 10**(pKa - pH)), so it needs the component pKa; pass an
    array of pKa values to get one coordinate per component. Every other
    variable type passes through unchanged.
    """
    vtype = coerce_variable_type(variable_type)
    if vtype is VariableType.TEMPERATURE:
        kelvin = np.asarray(value, dtype=float) + ABSOLUTE_ZERO_C
        if np.any(kelvin <= 0):
            raise InvalidParameter("temperature", value, f"must be above -{ABSOLUTE_ZERO_C} °C")
        return 1.0 / (value + ABSOLUTE_ZERO_C)
    if vtype is VariableType.PH:
        if pka is None:
            raise InvalidParameter("pka", pka, "is required for a pH axis")
        pka = np.asarray(pka, dtype=float)
        out = 1.0 / (1.0 + np.power(10.0, pka - value))
        return float(out) if out.ndim == 0 else out
    return value


def variable_type_from_name(name: str) -> VariableType:
    """Legacy free-text axis labels -> variable type."""
    if not name:
        raise InvalidVariableType(name)
    upper = name.strip().upper()

    if upper == "TGS" or ("TEMP" in upper and "GRAD" in upper):
        return VariableType.TEMPERATURE_GRADIENT_SLOPE
    if "TEMP" in upper or upper == "T":
        return VariableType.TEMPERATURE
    if upper == "PH":
        return VariableType.PH
    if ("GRADIENT" in upper and "TIME" in upper) or upper == "TGRAD":
        return VariableType.GRADIENT_TIME
    if "FLOW" in upper and "GRAD" in upper:
        return VariableType.FLOW_RATE_GRADIENT_SLOPE
    if ("FLOW" in upper and "RATE" in upper) or upper == "FRATE":
        return VariableType.FLOW_RATE
    if "IONIC" in upper or "BUFFER" in upper:
        return VariableType.IONIC_STRENGTH
    if ("GRADIENT" in upper and "SLOPE" in upper) or upper == "GS":
        return VariableType.GRADIENT_SLOPE
    if upper == "%B" or "ISOCRATIC" in upper:
        return VariableType.PERCENT_B
    raise InvalidVariableType(name)


def display_name(variable_type) -> str:
    return _DISPLAY_NAMES[coerce_variable_type(variable_type)]
