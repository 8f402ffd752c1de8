from __future__ import annotations


class EngineError(ValueError):
    """Base class for every failure the engine reports to its caller."""

    kind = "EngineError"

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": str(self)}


class InvalidParameter(EngineError):
    kind = "InvalidParameter"

    def __init__(self, parameter: str, value, reason: str = "is out of range"):
        self.parameter = parameter
        self.value = value
        super().__init__(f"{parameter} {reason} (got {value!r})")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "parameter": self.parameter}


class ArrayLengthMismatch(EngineError):
    kind = "ArrayLengthMismatch"

    def __init__(self, parameter: str, expected: int, actual: int):
        self.parameter = parameter
        self.expected = expected
        self.actual = actual
        super().__init__(f"{parameter} has {actual} entries, expected {expected}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "parameter": self.parameter}


class InvalidVariableType(EngineError):
    kind = "InvalidVariableType"

    def __init__(self, value):
        self.value = value
        super().__init__(f"unknown variable type {value!r}")


class DegenerateFit(EngineError):
    kind = "DegenerateFit"

    def __init__(self, component: int, coordinate: float):
        self.component = component
        self.coordinate = coordinate
        super().__init__(
            f"calibration points of component {component} collapse to the same "
            f"transformed coordinate {coordinate!r}"
        )


class DegenerateResolution(EngineError):
    kind = "DegenerateResolution"

    def __init__(self, pair: tuple[int, int] | None):
        self.pair = pair
        if pair is None:
            super().__init__("every evaluated point has a zero retention factor in its critical pair")
        else:
            super().__init__(f"critical pair {pair} has a zero retention factor")
