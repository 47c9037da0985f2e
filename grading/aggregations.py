"""Collapse raw score records into one percentage per category."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .schemas import AssessmentCategory, CategoryPercentage, ScoreRecord
from .weights import WeightProfile


def _empty_bucket() -> Dict[str, float]:
    return {
        "score": 0.0,
        "max_score": 0.0,
        "count": 0,
    }


def _group_by_category(records: Iterable[ScoreRecord]) -> Dict[AssessmentCategory, Dict[str, float]]:
    buckets: Dict[AssessmentCategory, Dict[str, float]] = defaultdict(_empty_bucket)
    for record in records:
        bucket = buckets[record.category]
        bucket["score"] += float(record.score)
        bucket["max_score"] += float(record.max_score)
        bucket["count"] += 1
    return buckets


def find_degenerate_categories(records: Iterable[ScoreRecord]) -> List[AssessmentCategory]:
    """Categories that have records but a zero total ``max_score``."""
    buckets = _group_by_category(records)
    return [
        category
        for category in AssessmentCategory
        if category in buckets and buckets[category]["max_score"] <= 0.0
    ]


def aggregate(
    records: Iterable[ScoreRecord],
    profile: Optional[WeightProfile] = None,
) -> Dict[AssessmentCategory, CategoryPercentage]:
    """Sum scores and max scores per category and turn them into percentages.

    Records in the same category are pooled before dividing, so two tests of
    10/20 and 20/20 give 75 %, not the mean of 50 % and 100 %. Categories
    without records are left out of the result entirely.
    """
    buckets = _group_by_category(records)
    result: Dict[AssessmentCategory, CategoryPercentage] = {}
    # Iterate the enum so output order is stable regardless of record order.
    for category in AssessmentCategory:
        bucket = buckets.get(category)
        if bucket is None:
            continue
        if bucket["max_score"] > 0.0:
            percentage = 100.0 * bucket["score"] / bucket["max_score"]
        else:
            logging.warning(
                f"DegenerateDataWarning: {int(bucket['count'])} {category.value} record(s) "
                f"with zero total max score; counting the category as 0%"
            )
            percentage = 0.0
        result[category] = CategoryPercentage(
            category=category,
            percentage=percentage,
            weight=profile.weight_for(category) if profile is not None else None,
            score_total=bucket["score"],
            max_score_total=bucket["max_score"],
            record_count=int(bucket["count"]),
        )
    return result


__all__ = [
    "aggregate",
    "find_degenerate_categories",
]
