"""Weighted grade-aggregation engine."""

from .aggregations import aggregate, find_degenerate_categories
from .banding import DEFAULT_GRADE_BANDS, GradeBand, GradeBander, band
from .calculator import compute_overall, grade_records
from .config import ConfigError, EngineConfig, load_engine_config
from .overview import build_class_overview
from .schemas import (
    AssessmentCategory,
    CategoryPercentage,
    ClassOverview,
    OverallGrade,
    ScoreRecord,
)
from .weights import (
    DEFAULT_WEIGHT_TABLE,
    InvalidWeightError,
    NegativeWeightError,
    WeightProfile,
    WeightSumMismatchError,
    WeightValidationError,
    validate_weights,
)

__all__ = [
    "AssessmentCategory",
    "CategoryPercentage",
    "ClassOverview",
    "ConfigError",
    "DEFAULT_GRADE_BANDS",
    "DEFAULT_WEIGHT_TABLE",
    "EngineConfig",
    "GradeBand",
    "GradeBander",
    "InvalidWeightError",
    "NegativeWeightError",
    "OverallGrade",
    "ScoreRecord",
    "WeightProfile",
    "WeightSumMismatchError",
    "WeightValidationError",
    "aggregate",
    "band",
    "build_class_overview",
    "compute_overall",
    "find_degenerate_categories",
    "grade_records",
    "load_engine_config",
    "validate_weights",
]
