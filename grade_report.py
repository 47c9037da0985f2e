#!/usr/bin/env python3
"""Weighted grade report for a class.

Usage:
  python grade_report.py scores.csv [--weights weights.yaml] [--config config.yaml]
                         [--period P1] [--student S1] [--output-json overview.json]

Every class-subject found in the score file is graded with its weight profile
from ``--weights``; class-subjects without an entry there get the default
weight table from the config.

Exit codes:
  0 = report printed
  1 = unreadable input or an invalid weight profile
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError
from rich.console import Console

from console.report import build_breakdown_table, build_profiles_table, print_overview, print_weight_error
from grading.calculator import grade_records
from grading.config import ConfigError, EngineConfig, load_engine_config
from grading.overview import build_class_overview
from grading.utils import dumps_json, load_score_records, load_weight_tables
from grading.weights import WeightProfile, WeightValidationError
from utils.logger_setup import setup_logging_from_config


def build_profiles(
    config: EngineConfig,
    class_subject_ids: List[str],
    tables: Dict[str, Dict[str, float]],
) -> Dict[str, WeightProfile]:
    profiles: Dict[str, WeightProfile] = {}
    for cs_id in sorted(set(class_subject_ids) | set(tables)):
        if cs_id in tables:
            try:
                profiles[cs_id] = config.profile_from_weights(tables[cs_id], cs_id)
            except WeightValidationError as exc:
                exc.class_subject_id = cs_id
                raise
        else:
            profiles[cs_id] = config.default_profile(cs_id)
    return profiles


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print weighted grades for a class from a score export")
    parser.add_argument("scores", help="Path to score records (.csv, .jsonl, .json or .parquet)")
    parser.add_argument("--weights", default=None, help="YAML/JSON mapping of class-subject to category weights")
    parser.add_argument("--config", default=None, help="Engine config YAML (default weights, grade bands, logging)")
    parser.add_argument("--period", default=None, help="Only use records of this grading period")
    parser.add_argument("--student", default=None, help="Also print the category breakdown for this student")
    parser.add_argument("--output-json", default=None, help="Write the overview as JSON to this path")
    args = parser.parse_args(argv)

    console = Console()

    try:
        config_path = Path(args.config) if args.config else None
        config = load_engine_config(config_path)
        if config_path is not None:
            setup_logging_from_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Failed to load config:[/red] {e}")
        return 1

    scores_path = Path(args.scores).expanduser()
    if not scores_path.exists():
        console.print(f"[red]File not found:[/red] {scores_path}")
        return 1

    try:
        records = load_score_records(scores_path, period_id=args.period)
        tables = load_weight_tables(Path(args.weights)) if args.weights else {}
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]Failed to read input:[/red] {e}")
        return 1

    class_subject_ids = [record.class_subject_id for record in records]
    try:
        profiles = build_profiles(config, class_subject_ids, tables)
    except WeightValidationError as e:
        print_weight_error(console, e, context=getattr(e, "class_subject_id", ""))
        return 1
    except ValueError as e:
        console.print(f"[red]Invalid weights file:[/red] {e}")
        return 1

    bander = config.build_bander()
    overview = build_class_overview(records, profiles, bander)

    console.print(build_profiles_table(profiles))
    print_overview(console, overview)

    if args.student:
        student_records = [r for r in records if r.student_id == args.student]
        if not student_records:
            console.print(f"[yellow]No records for student:[/yellow] {args.student}")
        for cs_id, profile in profiles.items():
            subject_records = [r for r in student_records if r.class_subject_id == cs_id]
            if not subject_records:
                continue
            grade = grade_records(subject_records, profile, bander)
            console.print(build_breakdown_table(grade, title=f"{args.student} / {cs_id}"))

    if args.output_json:
        output_path = Path(args.output_json)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(dumps_json(overview.model_dump(mode="json")))
        console.print(f"Overview written to {output_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
