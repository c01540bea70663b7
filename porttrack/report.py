"""JSON serialization of extraction records and coverage results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from .models import AnalysisResult, ClassMethods

REFERENCE_FILENAME = "reference.json"
TARGET_FILENAME = "target.json"
ANALYSIS_FILENAME = "analysis.json"


def dump_records(records: Sequence[ClassMethods]) -> str:
    return _dumps([record.to_dict() for record in records])


def dump_analysis(result: AnalysisResult) -> str:
    return _dumps(result.to_dict())


def write_records(path: Path, records: Sequence[ClassMethods]) -> Path:
    return _write(path, dump_records(records))


def write_analysis(path: Path, result: AnalysisResult) -> Path:
    return _write(path, dump_analysis(result))


def _dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


__all__ = [
    "ANALYSIS_FILENAME",
    "REFERENCE_FILENAME",
    "TARGET_FILENAME",
    "dump_analysis",
    "dump_records",
    "write_analysis",
    "write_records",
]
