"""Loading helpers for score records and weight files."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import orjson
import pandas as pd
import yaml

from .schemas import ScoreRecord

RECORD_COLUMNS = ["student_id", "class_subject_id", "category", "score", "max_score"]
OPTIONAL_COLUMNS = ["period_id", "grade", "remarks"]
SUPPORTED_SCORE_FORMATS = {".csv", ".jsonl", ".json", ".parquet"}

# Historical exports name the category column after the exam type.
COLUMN_ALIASES = {
    "exam_type": "category",
    "examType": "category",
    "maxScore": "max_score",
    "studentId": "student_id",
    "classSubjectId": "class_subject_id",
    "academic_period_id": "period_id",
}


def load_json(path: Path) -> Any:
    """Load JSON via orjson for performance."""
    with path.open("rb") as f:
        return orjson.loads(f.read())


def load_jsonl(path: Path) -> Iterator[Any]:
    """Yield JSON objects from a JSONL file."""
    with path.open("rb") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield orjson.loads(line)


def dumps_json(data: Any) -> str:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")


def _clean(value: Any) -> Optional[Any]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def read_score_frame(path: Path) -> pd.DataFrame:
    ext = path.suffix.lower()
    if ext not in SUPPORTED_SCORE_FORMATS:
        raise ValueError(f"Unsupported score file format (expected .csv, .jsonl, .json or .parquet): {path}")
    if ext == ".parquet":
        df = pd.read_parquet(path)
    elif ext == ".csv":
        df = pd.read_csv(path, dtype=str)
    elif ext == ".jsonl":
        df = pd.DataFrame(list(load_jsonl(path)))
    else:
        df = pd.DataFrame(load_json(path))
    df = df.rename(columns={k: v for k, v in COLUMN_ALIASES.items() if k in df.columns})
    missing = [col for col in RECORD_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Score file is missing required columns: {', '.join(missing)}")
    return df


def frame_to_records(df: pd.DataFrame, *, period_id: Optional[str] = None) -> List[ScoreRecord]:
    if period_id is not None:
        if "period_id" not in df.columns:
            raise ValueError(f"Cannot filter by period {period_id}: score file has no period_id column")
        df = df[df["period_id"].astype(str) == str(period_id)]
    columns = [col for col in RECORD_COLUMNS + OPTIONAL_COLUMNS if col in df.columns]
    records: List[ScoreRecord] = []
    for row in df[columns].to_dict(orient="records"):
        payload = {key: _clean(value) for key, value in row.items()}
        payload["student_id"] = str(payload["student_id"])
        payload["class_subject_id"] = str(payload["class_subject_id"])
        if payload.get("period_id") is not None:
            payload["period_id"] = str(payload["period_id"])
        payload["category"] = str(payload["category"]).strip().upper()
        records.append(ScoreRecord.model_validate(payload))
    return records


def load_score_records(path: Path, *, period_id: Optional[str] = None) -> List[ScoreRecord]:
    """Read score records from a tabular export."""
    return frame_to_records(read_score_frame(path), period_id=period_id)


def load_weight_tables(path: Path) -> Dict[str, Dict[str, float]]:
    """Read ``{class_subject_id: {CATEGORY: weight}}`` from YAML or JSON."""
    if not path.exists():
        raise FileNotFoundError(f"Weights file not found: {path}")
    if path.suffix.lower() == ".json":
        data = load_json(path)
    else:
        data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Weights file root must be a mapping: {path}")
    tables: Dict[str, Dict[str, float]] = {}
    for cs_id, weights in data.items():
        if not isinstance(weights, Mapping):
            raise ValueError(f"Weights for {cs_id} must be a mapping of category to weight")
        table: Dict[str, float] = {}
        for key, value in weights.items():
            category = str(key).strip().upper()
            try:
                table[category] = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Weight for {cs_id}.{category} must be a number, got {value!r}") from exc
        tables[str(cs_id)] = table
    return tables
