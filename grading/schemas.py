"""Pydantic schemas shared across the grading engine."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, computed_field


class AssessmentCategory(str, Enum):
    HOMEWORK = "HOMEWORK"
    CLASSWORK = "CLASSWORK"
    TEST = "TEST"
    QUIZ = "QUIZ"
    EXAM = "EXAM"
    CLASS_TEST = "CLASS_TEST"
    MID_TERM = "MID_TERM"
    END_OF_TERM = "END_OF_TERM"
    ASSIGNMENT = "ASSIGNMENT"
    PROJECT = "PROJECT"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: Dict[AssessmentCategory, str] = {
    AssessmentCategory.HOMEWORK: "Homework",
    AssessmentCategory.CLASSWORK: "Classwork",
    AssessmentCategory.TEST: "Test",
    AssessmentCategory.QUIZ: "Quiz",
    AssessmentCategory.EXAM: "Exam",
    AssessmentCategory.CLASS_TEST: "Class Test",
    AssessmentCategory.MID_TERM: "Mid-Term",
    AssessmentCategory.END_OF_TERM: "End of Term",
    AssessmentCategory.ASSIGNMENT: "Assignment",
    AssessmentCategory.PROJECT: "Project",
}

ProfileStatus = Literal["draft", "committed"]


class ScoreRecord(BaseModel):
    student_id: str
    class_subject_id: str
    period_id: Optional[str] = None
    category: AssessmentCategory
    score: float = Field(ge=0)
    # Zero is tolerated here; the aggregator flags it as degenerate data.
    max_score: float = Field(ge=0)
    grade: Optional[str] = None
    remarks: Optional[str] = None

    model_config = {
        "extra": "ignore",
    }


class CategoryPercentage(BaseModel):
    category: AssessmentCategory
    percentage: float
    weight: Optional[float] = None
    score_total: float = 0.0
    max_score_total: float = 0.0
    record_count: int = 0

    @computed_field(return_type=str)
    def label(self) -> str:
        return self.category.label


class OverallGrade(BaseModel):
    overall_percentage: Optional[float] = None
    letter_grade: Optional[str] = None
    total_weight: float = 0.0
    categories: List[CategoryPercentage] = Field(default_factory=list)

    @computed_field(return_type=bool)
    def is_graded(self) -> bool:
        return self.overall_percentage is not None


class SubjectGrade(BaseModel):
    class_subject_id: str
    overall_percentage: Optional[float] = None
    letter_grade: Optional[str] = None
    has_grades: bool = False
    record_count: int = 0
    categories: List[CategoryPercentage] = Field(default_factory=list)


class StudentOverview(BaseModel):
    student_id: str
    subjects: List[SubjectGrade] = Field(default_factory=list)
    overall_average: Optional[float] = None
    overall_grade: Optional[str] = None


class ClassOverview(BaseModel):
    class_subject_ids: List[str] = Field(default_factory=list)
    students: List[StudentOverview] = Field(default_factory=list)
    skipped_record_count: int = 0


class CategoryInfo(BaseModel):
    category: AssessmentCategory
    label: str
    default_weight: float


class WeightsPayload(BaseModel):
    weights: Dict[AssessmentCategory, float] = Field(default_factory=dict)


class WeightValidationResponse(BaseModel):
    valid: bool
    total: float
    weights: Dict[AssessmentCategory, float] = Field(default_factory=dict)


class ComputeGradeRequest(BaseModel):
    weights: Dict[AssessmentCategory, float]
    records: List[ScoreRecord] = Field(default_factory=list)


class ClassOverviewRequest(BaseModel):
    profiles: Dict[str, Dict[AssessmentCategory, float]]
    records: List[ScoreRecord] = Field(default_factory=list)
