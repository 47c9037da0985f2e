from __future__ import annotations

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
from fastapi.testclient import TestClient

from grading.config import EngineConfig
from grading.server import create_app


@pytest.fixture
def client():
    return TestClient(create_app(EngineConfig()))


def test_categories_list_labels_and_defaults(client):
    response = client.get("/api/categories")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 10
    assert data[0] == {"category": "HOMEWORK", "label": "Homework", "default_weight": 10.0}
    assert {row["category"]: row["default_weight"] for row in data}["END_OF_TERM"] == 15.0


def test_validate_accepts_complete_profile(client):
    response = client.post("/api/weights/validate", json={"weights": {"HOMEWORK": 20, "TEST": 30, "EXAM": 50}})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["total"] == pytest.approx(100.0)
    assert data["weights"]["QUIZ"] == 0.0


def test_validate_reports_sum_mismatch(client):
    response = client.post("/api/weights/validate", json={"weights": {"HOMEWORK": 50, "TEST": 46.5}})
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "WeightSumMismatch"
    assert error["actual_total"] == pytest.approx(96.5)
    assert error["delta"] == pytest.approx(3.5)


def test_validate_reports_negative_weight(client):
    response = client.post("/api/weights/validate", json={"weights": {"HOMEWORK": 110, "EXAM": -10}})
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "NegativeWeight"
    assert error["category"] == "EXAM"


def test_unknown_category_is_a_request_error(client):
    response = client.post("/api/weights/validate", json={"weights": {"RECESS": 100}})
    assert response.status_code == 422
    assert "detail" in response.json()


def test_compute_partially_graded_student(client):
    payload = {
        "weights": {"HOMEWORK": 20, "TEST": 30, "EXAM": 50},
        "records": [
            {"student_id": "s-1", "class_subject_id": "math", "category": "HOMEWORK", "score": 8, "max_score": 10},
            {"student_id": "s-1", "class_subject_id": "math", "category": "TEST", "score": 21, "max_score": 30},
        ],
    }
    response = client.post("/api/grades/compute", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["overall_percentage"] == pytest.approx(74.0)
    assert data["letter_grade"] == "B"
    assert data["total_weight"] == pytest.approx(50.0)
    assert data["is_graded"] is True
    assert [c["category"] for c in data["categories"]] == ["HOMEWORK", "TEST"]


def test_compute_without_records_is_ungraded(client):
    response = client.post("/api/grades/compute", json={"weights": {"EXAM": 100}, "records": []})
    assert response.status_code == 200
    data = response.json()
    assert data["overall_percentage"] is None
    assert data["letter_grade"] is None
    assert data["is_graded"] is False


def test_compute_rejects_invalid_profile(client):
    response = client.post("/api/grades/compute", json={"weights": {"EXAM": 90}, "records": []})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "WeightSumMismatch"


def test_class_overview_endpoint(client):
    payload = {
        "profiles": {
            "math": {"HOMEWORK": 20, "TEST": 30, "EXAM": 50},
            "english": {"EXAM": 100},
        },
        "records": [
            {"student_id": "s-1", "class_subject_id": "math", "category": "HOMEWORK", "score": 8, "max_score": 10},
            {"student_id": "s-1", "class_subject_id": "math", "category": "TEST", "score": 21, "max_score": 30},
            {"student_id": "s-1", "class_subject_id": "english", "category": "EXAM", "score": 45, "max_score": 50},
        ],
    }
    response = client.post("/api/grades/overview", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["class_subject_ids"] == ["math", "english"]
    student = data["students"][0]
    assert student["overall_average"] == pytest.approx(82.0)
    assert student["overall_grade"] == "A"


def test_validate_reports_non_finite_weight(client):
    response = client.post(
        "/api/weights/validate",
        content='{"weights": {"HOMEWORK": NaN, "EXAM": 100}}',
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "InvalidWeight"
    assert error["category"] == "HOMEWORK"
