"""Weighted overall grade over the categories a student has data for."""

from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional

from .aggregations import aggregate
from .banding import GradeBander, default_bander
from .schemas import AssessmentCategory, CategoryPercentage, OverallGrade, ScoreRecord
from .weights import WeightProfile


def compute_overall(
    category_percentages: Mapping[AssessmentCategory, CategoryPercentage],
    profile: WeightProfile,
    bander: Optional[GradeBander] = None,
) -> OverallGrade:
    """Combine category percentages into one weighted percentage.

    Only categories present in ``category_percentages`` take part: their
    weights form the denominator, so an exam that has not happened yet neither
    adds to nor dilutes the result. When the present weights sum to zero the
    result is ungraded (``overall_percentage is None``) and no letter is
    assigned.
    """
    breakdown: List[CategoryPercentage] = []
    products: List[float] = []
    weights: List[float] = []

    for category in AssessmentCategory:
        entry = category_percentages.get(category)
        if entry is None:
            continue
        weight = profile.weight_for(category)
        products.append(entry.percentage * weight)
        weights.append(weight)
        breakdown.append(entry.model_copy(update={"weight": weight}))

    total_weight = math.fsum(weights)
    if total_weight <= 0.0:
        return OverallGrade(total_weight=total_weight, categories=breakdown)

    # Drop float noise so a uniform 80% bands as 80, not 79.99999999999999.
    overall = round(math.fsum(products) / total_weight, 9)
    bander = bander or default_bander()
    return OverallGrade(
        overall_percentage=overall,
        letter_grade=bander.band(overall),
        total_weight=total_weight,
        categories=breakdown,
    )


def grade_records(
    records: Iterable[ScoreRecord],
    profile: WeightProfile,
    bander: Optional[GradeBander] = None,
) -> OverallGrade:
    """Aggregate one student's records for a class-subject and grade them."""
    return compute_overall(aggregate(records, profile), profile, bander)


__all__ = [
    "compute_overall",
    "grade_records",
]
