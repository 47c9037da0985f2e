"""Class-wide grades overview: every student across every class-subject."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import DefaultDict, Dict, Iterable, List, Mapping, Optional

from .banding import GradeBander, default_bander
from .calculator import grade_records
from .schemas import ClassOverview, ScoreRecord, StudentOverview, SubjectGrade
from .weights import WeightProfile


def _subject_grade(
    class_subject_id: str,
    records: List[ScoreRecord],
    profile: WeightProfile,
    bander: GradeBander,
) -> SubjectGrade:
    if not records:
        return SubjectGrade(class_subject_id=class_subject_id)
    grade = grade_records(records, profile, bander)
    return SubjectGrade(
        class_subject_id=class_subject_id,
        overall_percentage=grade.overall_percentage,
        letter_grade=grade.letter_grade,
        has_grades=True,
        record_count=len(records),
        categories=grade.categories,
    )


def build_class_overview(
    records: Iterable[ScoreRecord],
    profiles: Mapping[str, WeightProfile],
    bander: Optional[GradeBander] = None,
    *,
    student_ids: Optional[Iterable[str]] = None,
) -> ClassOverview:
    """Grade each student in every class-subject of ``profiles``.

    A student's overall average is the plain mean of the subjects that
    produced a percentage; subjects without data are listed but do not count.
    Students listed in ``student_ids`` appear even without any record.
    """
    bander = bander or default_bander()
    grouped: DefaultDict[str, DefaultDict[str, List[ScoreRecord]]] = defaultdict(lambda: defaultdict(list))
    skipped = 0
    for record in records:
        if record.class_subject_id not in profiles:
            skipped += 1
            continue
        grouped[record.student_id][record.class_subject_id].append(record)

    if skipped:
        logging.warning(f"Skipped {skipped} score record(s) for class-subjects without a weight profile")

    all_students = set(grouped.keys())
    if student_ids is not None:
        all_students.update(student_ids)

    class_subject_ids = list(profiles.keys())
    students: List[StudentOverview] = []
    for student_id in sorted(all_students):
        by_subject: Dict[str, List[ScoreRecord]] = grouped.get(student_id, {})
        subjects = [
            _subject_grade(cs_id, by_subject.get(cs_id, []), profiles[cs_id], bander)
            for cs_id in class_subject_ids
        ]
        scored = [s.overall_percentage for s in subjects if s.overall_percentage is not None]
        average = round(math.fsum(scored) / len(scored), 9) if scored else None
        students.append(
            StudentOverview(
                student_id=student_id,
                subjects=subjects,
                overall_average=average,
                overall_grade=bander.band(average) if average is not None else None,
            )
        )

    return ClassOverview(
        class_subject_ids=class_subject_ids,
        students=students,
        skipped_record_count=skipped,
    )


__all__ = ["build_class_overview"]
