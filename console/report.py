"""Rich tables and panels for class grade reports."""

from __future__ import annotations

from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from grading.schemas import ClassOverview, OverallGrade
from grading.weights import WeightProfile, WeightValidationError

UNGRADED = "-"

_GRADE_STYLES: Dict[str, str] = {
    "A": "bold green",
    "B": "green",
    "C": "yellow",
    "D": "yellow",
    "E": "red",
    "F": "bold red",
}


def format_percentage(value: Optional[float]) -> str:
    if value is None:
        return UNGRADED
    return f"{value:.1f}%"


def _grade_text(percentage: Optional[float], letter: Optional[str]) -> Text:
    if percentage is None or letter is None:
        return Text(UNGRADED, style="dim")
    return Text(f"{percentage:.1f} ({letter})", style=_GRADE_STYLES.get(letter, ""))


def build_overview_table(overview: ClassOverview, *, title: str = "Class grades") -> Table:
    table = Table(title=title)
    table.add_column("student")
    for cs_id in overview.class_subject_ids:
        table.add_column(cs_id, justify="right")
    table.add_column("average", justify="right")

    for student in overview.students:
        cells = [Text(student.student_id)]
        for subject in student.subjects:
            cells.append(_grade_text(subject.overall_percentage, subject.letter_grade))
        cells.append(_grade_text(student.overall_average, student.overall_grade))
        table.add_row(*cells)
    return table


def build_breakdown_table(grade: OverallGrade, *, title: str = "Category breakdown") -> Table:
    table = Table(title=title)
    table.add_column("category")
    table.add_column("records", justify="right")
    table.add_column("score", justify="right")
    table.add_column("percentage", justify="right")
    table.add_column("weight", justify="right")
    for entry in grade.categories:
        table.add_row(
            entry.label,
            str(entry.record_count),
            f"{entry.score_total:g}/{entry.max_score_total:g}",
            format_percentage(entry.percentage),
            f"{entry.weight or 0.0:g}",
        )
    return table


def build_profiles_table(profiles: Dict[str, WeightProfile]) -> Table:
    table = Table(title="Weight profiles")
    table.add_column("class-subject")
    table.add_column("weights")
    table.add_column("total", justify="right")
    for cs_id, profile in profiles.items():
        non_zero = ", ".join(
            f"{category.label} {weight:g}"
            for category, weight in profile.weights.items()
            if weight
        )
        table.add_row(cs_id, non_zero, f"{profile.total:g}")
    return table


def print_weight_error(console: Console, exc: WeightValidationError, *, context: str = "") -> None:
    prefix = f"{context}: " if context else ""
    details = str(exc)
    hint = getattr(exc, "hint", None)
    if hint:
        details = f"{details} ({hint})"
    console.print(f"[red]{prefix}Invalid weight profile:[/red] {details}")


def print_overview(console: Console, overview: ClassOverview) -> None:
    graded = sum(1 for s in overview.students if s.overall_average is not None)
    console.print(
        Panel.fit(
            Text(
                f"Students: {len(overview.students)}    Graded: {graded}    "
                f"Skipped records: {overview.skipped_record_count}",
                style="bold",
            ),
            title="Summary",
        )
    )
    console.print(build_overview_table(overview))
