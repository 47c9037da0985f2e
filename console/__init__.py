"""Terminal rendering for grade reports."""

from .report import build_breakdown_table, build_overview_table, print_overview  # noqa: F401

__all__ = [
    "build_breakdown_table",
    "build_overview_table",
    "print_overview",
]
