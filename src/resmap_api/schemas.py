from __future__ import annotations
from typing import List, Optional, Dict, Union, Literal
import math
from pydantic import BaseModel, Field, model_validator

from resmap_engine import (
    LinearPolynomial,
    BilinearPolynomial,
    TrilinearPolynomial,
    ParameterSet,
    CalculationResults,
)

POLYNOMIALS = {1: LinearPolynomial, 2: BilinearPolynomial, 3: TrilinearPolynomial}
COEFFICIENT_NAMES = {
    1: ("a", "b"),
    2: ("aa", "ab", "ba", "b"),
    3: ("aaa", "aab", "baa", "bab", "aba", "abb", "bba", "b"),
}


def finite_or_none(value):
    value = float(value)
    return value if math.isfinite(value) else None


# ---- Request ----
class Axis(BaseModel):
    variable_type: Union[int, str]
    min: float
    max: float

    @model_validator(mode="after")
    def ordered(self) -> "Axis":
        if not self.min < self.max:
            raise ValueError(f"axis min ({self.min}) must be below max ({self.max})")
        return self


class Column(BaseModel):
    length: float = Field(25.0, gt=0)
    diameter: float = Field(0.46, gt=0)
    particle_diameter: float = Field(5.0, gt=0)


class Method(BaseModel):
    flow_rate: float = Field(1.0, gt=0)
    flow_rate_reference: float = Field(1.0, gt=0)
    dead_time_experimental: float = Field(0.0, ge=0)
    plate_number: int = Field(32_000, gt=0)


class ParameterSetIn(BaseModel):
    column: Column = Column()
    method: Method = Method()
    number_of_variables: Literal[1, 2, 3]
    coefficients: Dict[str, List[float]]
    x: Axis = Axis(variable_type=3, min=30.0, max=90.0)
    y: Axis = Axis(variable_type=1, min=30.0, max=60.0)
    z: Axis = Axis(variable_type=9, min=0.0, max=100.0)
    pka: Optional[List[float]] = None
    intensities: Optional[List[float]] = None

    @model_validator(mode="after")
    def coefficient_names(self) -> "ParameterSetIn":
        expected = set(COEFFICIENT_NAMES[self.number_of_variables])
        got = set(self.coefficients)
        if got != expected:
            raise ValueError(
                f"{self.number_of_variables}-variable model needs coefficients "
                f"{sorted(expected)}, got {sorted(got)}"
            )
        return self

    def to_engine(self) -> ParameterSet:
        polynomial = POLYNOMIALS[self.number_of_variables](**self.coefficients)
        return ParameterSet(
            polynomial=polynomial,
            column_length=self.column.length,
            column_diameter=self.column.diameter,
            particle_diameter=self.column.particle_diameter,
            flow_rate=self.method.flow_rate,
            flow_rate_reference=self.method.flow_rate_reference,
            dead_time_experimental=self.method.dead_time_experimental,
            plate_number=self.method.plate_number,
            variable_type_x=self.x.variable_type,
            variable_type_y=self.y.variable_type,
            variable_type_z=self.z.variable_type,
            x_min=self.x.min, x_max=self.x.max,
            y_min=self.y.min, y_max=self.y.max,
            z_min=self.z.min, z_max=self.z.max,
            pka=self.pka,
            intensities=self.intensities,
        )


class PhysicsRequest(BaseModel):
    column_length: float
    column_diameter: float
    flow_rate: float


class EvaluateRequest(BaseModel):
    parameters: ParameterSetIn
    x: float
    y: Optional[float] = None
    z: Optional[float] = None
    include_pairs: bool = False
    names: Optional[List[str]] = None


class ScanSettingsIn(BaseModel):
    x_steps: Optional[int] = Field(None, ge=2)
    y_steps: Optional[int] = Field(None, ge=2)
    z_steps: Optional[int] = Field(None, ge=2)
    screen_z: Optional[bool] = None
    z_value: Optional[float] = None
    objective_mode: Optional[str] = Field(None, pattern="^(constraint_then_time|weighted)$")
    target_Rs: Optional[float] = Field(None, gt=0)
    alpha_time: Optional[float] = Field(None, ge=0.0, le=1.0)


class ScanRequest(BaseModel):
    parameters: ParameterSetIn
    settings: ScanSettingsIn = ScanSettingsIn()
    include_grid: bool = True


class LineariseRequest(BaseModel):
    variable_type: Union[int, str]
    range1: float
    range2: float
    values1: List[float]
    values2: List[float]
    pka: Optional[List[float]] = None


# ---- Response ----
class PhysicsResponse(BaseModel):
    mobile_phase_volume: float
    dead_time: float
    linear_velocity: float


class PairRow(BaseModel):
    pair: str
    k1: float
    k2: float
    Rs: Optional[float]


class EvaluateResponse(BaseModel):
    mobile_phase_volume: float
    dead_time: float
    linear_velocity: float
    retention_factors: List[float]
    retention_times: List[float]
    peak_widths: List[float]
    current_resolution: Optional[float]
    critical_pair: Optional[List[int]]
    current_point: List[float]
    max_resolution: Optional[float] = None
    min_resolution: Optional[float] = None
    optimal_point: Optional[List[float]] = None
    pairs: Optional[List[PairRow]] = None

    @classmethod
    def from_results(cls, results: CalculationResults, pairs=None) -> "EvaluateResponse":
        d = results.to_dict()
        for key in ("current_resolution", "max_resolution", "min_resolution"):
            d[key] = finite_or_none(d[key])
        return cls(**d, pairs=pairs)


class GridOut(BaseModel):
    xs: List[float]
    ys: List[float]
    zs: List[float]
    resolution: List[List[List[Optional[float]]]]


class ScanResponse(BaseModel):
    optimum: EvaluateResponse
    optimal_resolution: Optional[float]
    degenerate_cells: int
    grid: Optional[GridOut] = None


class LineariseResponse(BaseModel):
    coefficients_a: List[float]
    coefficients_b: List[float]
