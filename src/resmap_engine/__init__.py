from .errors import (
    EngineError,
    InvalidParameter,
    ArrayLengthMismatch,
    InvalidVariableType,
    DegenerateFit,
    DegenerateResolution,
)
from .variables import VariableType, transform_variable, variable_type_from_name, display_name
from .core_models import (
    LinearPolynomial,
    BilinearPolynomial,
    TrilinearPolynomial,
    RetentionResult,
    CalculationResults,
    compute_retention,
    compute_retention_factors,
)
from .parameters import ParameterSet, ExperimentalData
from .column import ColumnPhysics, compute_column_physics
from .simulate_tools import (
    ResolutionScore,
    score_resolution,
    find_critical_pair,
    resolution_table,
    resolution_band,
    simulate_chromatogram,
)
from .calibration import (
    LinearFit,
    fit_linear,
    fit_bilinear,
    fit_trilinear,
    log_retention_factors,
    calibrate_from_experiments,
)
from .config import ScanSettings, resolve_scan_settings
from .optimizer import evaluate_point, scan_grid, optimize, ResolutionMap

__all__ = [
    "EngineError",
    "InvalidParameter",
    "ArrayLengthMismatch",
    "InvalidVariableType",
    "DegenerateFit",
    "DegenerateResolution",
    "VariableType",
    "transform_variable",
    "variable_type_from_name",
    "display_name",
    "LinearPolynomial",
    "BilinearPolynomial",
    "TrilinearPolynomial",
    "RetentionResult",
    "CalculationResults",
    "compute_retention",
    "compute_retention_factors",
    "ParameterSet",
    "ExperimentalData",
    "ColumnPhysics",
    "compute_column_physics",
    "ResolutionScore",
    "score_resolution",
    "find_critical_pair",
    "resolution_table",
    "resolution_band",
    "simulate_chromatogram",
    "LinearFit",
    "fit_linear",
    "fit_bilinear",
    "fit_trilinear",
    "log_retention_factors",
    "calibrate_from_experiments",
    "ScanSettings",
    "resolve_scan_settings",
    "evaluate_point",
    "scan_grid",
    "optimize",
    "ResolutionMap",
]
