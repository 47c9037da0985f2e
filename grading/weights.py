"""Weight profiles and the validator that gates committing them."""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field

from .schemas import AssessmentCategory, ProfileStatus

WEIGHT_TOTAL = 100.0
WEIGHT_TOLERANCE = 0.01
# Absorbs float noise so totals such as 99.99 sit inside the tolerance.
_FLOAT_SLACK = 1e-9

DEFAULT_WEIGHT_TABLE: Dict[AssessmentCategory, float] = {
    AssessmentCategory.HOMEWORK: 10.0,
    AssessmentCategory.CLASSWORK: 10.0,
    AssessmentCategory.TEST: 10.0,
    AssessmentCategory.QUIZ: 10.0,
    AssessmentCategory.EXAM: 10.0,
    AssessmentCategory.CLASS_TEST: 10.0,
    AssessmentCategory.MID_TERM: 15.0,
    AssessmentCategory.END_OF_TERM: 15.0,
    AssessmentCategory.ASSIGNMENT: 5.0,
    AssessmentCategory.PROJECT: 5.0,
}


class WeightValidationError(ValueError):
    code = "WeightValidationError"

    def to_dict(self) -> Dict[str, object]:
        return {"code": self.code, "message": str(self)}


class NegativeWeightError(WeightValidationError):
    code = "NegativeWeight"

    def __init__(self, category: AssessmentCategory, weight: float) -> None:
        self.category = category
        self.weight = weight
        super().__init__(f"Grade weights cannot be negative ({category.label}: {weight}%)")

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload["category"] = self.category.value
        payload["weight"] = self.weight
        return payload


class InvalidWeightError(WeightValidationError):
    code = "InvalidWeight"

    def __init__(self, category: AssessmentCategory) -> None:
        self.category = category
        super().__init__(f"Weight for {category.label} must be a finite number")

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload["category"] = self.category.value
        return payload


class WeightSumMismatchError(WeightValidationError):
    code = "WeightSumMismatch"

    def __init__(self, actual_total: float, delta: float) -> None:
        self.actual_total = actual_total
        # Positive: the profile is short by delta points. Negative: over by -delta.
        self.delta = delta
        super().__init__(
            f"Grade weights must total {WEIGHT_TOTAL:g}%. Current total: {actual_total:g}%"
        )

    @property
    def hint(self) -> str:
        if self.delta > 0:
            return f"need {self.delta:g}% more"
        return f"{-self.delta:g}% too much"

    def to_dict(self) -> Dict[str, object]:
        payload = super().to_dict()
        payload["actual_total"] = self.actual_total
        payload["delta"] = self.delta
        payload["hint"] = self.hint
        return payload


def complete_weights(weights: Mapping[AssessmentCategory | str, float]) -> Dict[AssessmentCategory, float]:
    """Return a mapping covering every category, missing ones as ``0.0``.

    String keys are coerced to :class:`AssessmentCategory`; unknown names raise
    ``ValueError``.
    """
    result: Dict[AssessmentCategory, float] = {category: 0.0 for category in AssessmentCategory}
    for key, value in weights.items():
        category = AssessmentCategory(key)
        weight = float(value)
        if math.isnan(weight) or math.isinf(weight):
            raise InvalidWeightError(category)
        result[category] = weight
    return result


def validate_weights(
    weights: Mapping[AssessmentCategory | str, float],
    *,
    tolerance: float = WEIGHT_TOLERANCE,
) -> Dict[AssessmentCategory, float]:
    """Validate a proposed weight table and return it completed.

    Raises :class:`NegativeWeightError` for the first negative weight in
    category order, then :class:`WeightSumMismatchError` when the total is more
    than ``tolerance`` away from 100.
    """
    completed = complete_weights(weights)
    for category, weight in completed.items():
        if weight < 0:
            raise NegativeWeightError(category, weight)

    total = sum(completed.values())
    if abs(total - WEIGHT_TOTAL) > tolerance + _FLOAT_SLACK:
        raise WeightSumMismatchError(round(total, 4), round(WEIGHT_TOTAL - total, 4))
    return completed


class WeightProfile(BaseModel):
    class_subject_id: Optional[str] = None
    weights: Dict[AssessmentCategory, float] = Field(default_factory=dict)
    status: ProfileStatus = "draft"

    @classmethod
    def from_defaults(
        cls,
        class_subject_id: Optional[str] = None,
        table: Optional[Mapping[AssessmentCategory | str, float]] = None,
    ) -> "WeightProfile":
        """Seed a committed profile for a newly established class-subject."""
        source = DEFAULT_WEIGHT_TABLE if table is None else table
        return cls(class_subject_id=class_subject_id, weights=dict(source)).commit()

    @property
    def is_committed(self) -> bool:
        return self.status == "committed"

    @property
    def total(self) -> float:
        return sum(self.weights.values())

    def weight_for(self, category: AssessmentCategory) -> float:
        return float(self.weights.get(category, 0.0))

    def commit(self, *, tolerance: float = WEIGHT_TOLERANCE) -> "WeightProfile":
        completed = validate_weights(self.weights, tolerance=tolerance)
        return self.model_copy(update={"weights": completed, "status": "committed"})

    def edit(self, updates: Mapping[AssessmentCategory | str, float]) -> "WeightProfile":
        """Return a draft with ``updates`` applied on top of the current weights."""
        weights = dict(self.weights)
        for key, value in updates.items():
            weights[AssessmentCategory(key)] = float(value)
        return self.model_copy(update={"weights": weights, "status": "draft"})
