from __future__ import annotations

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from grading.schemas import AssessmentCategory
from grading.weights import (
    DEFAULT_WEIGHT_TABLE,
    InvalidWeightError,
    NegativeWeightError,
    WeightProfile,
    WeightSumMismatchError,
    WeightValidationError,
    validate_weights,
)


def test_default_table_is_a_valid_profile():
    completed = validate_weights(DEFAULT_WEIGHT_TABLE)
    assert sum(completed.values()) == pytest.approx(100.0)
    assert completed[AssessmentCategory.MID_TERM] == 15.0
    assert set(completed) == set(AssessmentCategory)


def test_missing_categories_count_as_zero():
    completed = validate_weights({"HOMEWORK": 20, "TEST": 30, "EXAM": 50})
    assert len(completed) == len(AssessmentCategory)
    assert completed[AssessmentCategory.QUIZ] == 0.0
    assert completed[AssessmentCategory.EXAM] == 50.0


@pytest.mark.parametrize("total_offset", [-0.01, -0.005, 0.0, 0.005, 0.01])
def test_totals_within_tolerance_are_accepted(total_offset):
    weights = {"HOMEWORK": 50.0, "EXAM": 50.0 + total_offset}
    validate_weights(weights)


@pytest.mark.parametrize("total_offset", [-0.02, 0.02, -10.0, 25.0])
def test_totals_outside_tolerance_are_rejected(total_offset):
    weights = {"HOMEWORK": 50.0, "EXAM": 50.0 + total_offset}
    with pytest.raises(WeightSumMismatchError):
        validate_weights(weights)


def test_sum_mismatch_reports_total_and_signed_delta():
    with pytest.raises(WeightSumMismatchError) as excinfo:
        validate_weights({"HOMEWORK": 50, "TEST": 46.5})
    err = excinfo.value
    assert err.code == "WeightSumMismatch"
    assert err.actual_total == pytest.approx(96.5)
    assert err.delta == pytest.approx(3.5)
    assert err.hint == "need 3.5% more"
    assert str(err) == "Grade weights must total 100%. Current total: 96.5%"

    with pytest.raises(WeightSumMismatchError) as excinfo:
        validate_weights({"HOMEWORK": 50, "TEST": 53.5})
    assert excinfo.value.delta == pytest.approx(-3.5)
    assert excinfo.value.hint == "3.5% too much"
    assert excinfo.value.to_dict()["actual_total"] == pytest.approx(103.5)


def test_negative_weight_identifies_category():
    with pytest.raises(NegativeWeightError) as excinfo:
        validate_weights({"HOMEWORK": 110, "QUIZ": -10})
    err = excinfo.value
    assert err.category is AssessmentCategory.QUIZ
    assert err.code == "NegativeWeight"
    assert err.to_dict()["category"] == "QUIZ"
    assert isinstance(err, WeightValidationError)


def test_negative_weight_is_reported_even_when_sum_is_off():
    with pytest.raises(NegativeWeightError):
        validate_weights({"HOMEWORK": 10, "EXAM": -5})


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_weight_identifies_category(value):
    with pytest.raises(InvalidWeightError) as excinfo:
        validate_weights({"HOMEWORK": value, "EXAM": 100})
    err = excinfo.value
    assert err.category is AssessmentCategory.HOMEWORK
    assert err.to_dict()["code"] == "InvalidWeight"
    assert isinstance(err, WeightValidationError)


def test_unknown_category_is_rejected():
    with pytest.raises(ValueError):
        validate_weights({"HOMEWORK": 50, "FIELD_TRIP": 50})


def test_commit_and_recommit_round_trip():
    draft = WeightProfile(class_subject_id="cs-1", weights={"HOMEWORK": 20, "TEST": 30, "EXAM": 50})
    assert draft.status == "draft"
    committed = draft.commit()
    assert committed.is_committed
    assert committed.weight_for(AssessmentCategory.PROJECT) == 0.0

    again = committed.commit()
    assert again.is_committed
    assert again.weights == committed.weights


def test_failed_commit_leaves_draft_untouched():
    draft = WeightProfile(weights={"HOMEWORK": 40})
    with pytest.raises(WeightSumMismatchError):
        draft.commit()
    assert draft.status == "draft"


def test_edit_returns_draft_that_must_be_revalidated():
    committed = WeightProfile.from_defaults("cs-1")
    assert committed.is_committed

    edited = committed.edit({"EXAM": 20})
    assert edited.status == "draft"
    assert edited.weight_for(AssessmentCategory.EXAM) == 20.0
    assert committed.weight_for(AssessmentCategory.EXAM) == 10.0
    with pytest.raises(WeightSumMismatchError):
        edited.commit()

    rebalanced = edited.edit({"PROJECT": 0, "ASSIGNMENT": 0})
    assert rebalanced.commit().is_committed


def test_from_defaults_accepts_substitute_table():
    profile = WeightProfile.from_defaults("cs-2", {"EXAM": 60, "TEST": 40})
    assert profile.weight_for(AssessmentCategory.EXAM) == 60.0
    assert profile.weight_for(AssessmentCategory.HOMEWORK) == 0.0
