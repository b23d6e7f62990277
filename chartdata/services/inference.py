from __future__ import annotations

import math
import re
import warnings
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any

import pandas as pd

from ..models.column_info import ColumnInfo, ColumnType, DataStats
from ..models.parsed_data import ParsedData
from .coercion import is_missing

"""Column type inference.

A majority-vote heuristic, not a type system: a column is classified as
boolean, number or date when at least 90% of its first 100 non-missing
values qualify (checked in that order), otherwise string. A column with no
values at all is unknown. A few dirty cells never change the outcome.
"""

__all__ = [
    "SAMPLE_SIZE",
    "MAJORITY_THRESHOLD",
    "infer_type",
    "infer_column_types",
    "describe_columns",
]

SAMPLE_SIZE = 100
MAJORITY_THRESHOLD = 0.9
PROFILE_SAMPLE_VALUES = 5

_DATE_HINT = re.compile(r"\d{4}|\d{1,2}[/-]\d{1,2}")


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool) or value in ("true", "false")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned or "_" in cleaned:
            return False
        try:
            return math.isfinite(float(cleaned))
        except ValueError:
            return False
    return False


def _is_date(value: Any) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    if isinstance(value, str) and _DATE_HINT.search(value):
        with warnings.catch_warnings():
            # pandas warns when it falls back to dateutil for a single string
            warnings.simplefilter("ignore", UserWarning)
            try:
                return not pd.isna(pd.to_datetime(value, errors="coerce"))
            except (ValueError, TypeError, OverflowError):
                return False
    return False


def _share(sample: list[Any], check: Callable[[Any], bool]) -> float:
    return sum(1 for v in sample if check(v)) / len(sample)


def infer_type(values: Sequence[Any]) -> ColumnType:
    """Classify a column from its values.

    >>> infer_type([1, 2, "3", None]).value
    'number'
    >>> infer_type([None, ""]).value
    'unknown'
    """
    present = [v for v in values if not is_missing(v)]
    if not present:
        return ColumnType.UNKNOWN
    sample = present[:SAMPLE_SIZE]

    if _share(sample, _is_boolean) >= MAJORITY_THRESHOLD:
        return ColumnType.BOOLEAN
    if _share(sample, _is_number) >= MAJORITY_THRESHOLD:
        return ColumnType.NUMBER
    if _share(sample, _is_date) >= MAJORITY_THRESHOLD:
        return ColumnType.DATE
    return ColumnType.STRING


def infer_column_types(data: ParsedData) -> dict[str, ColumnType]:
    """Classify every column of a dataset, in header order."""
    return {h: infer_type(data.column_values(h)) for h in data.headers}


def describe_columns(data: ParsedData) -> DataStats:
    """Profile each column: type, a few sample values and the missing count."""
    columns: list[ColumnInfo] = []
    for header in data.headers:
        values = data.column_values(header)
        present = [v for v in values if not is_missing(v)]
        columns.append(
            ColumnInfo(
                name=header,
                type=infer_type(values),
                sample_values=present[:PROFILE_SAMPLE_VALUES],
                null_count=len(values) - len(present),
            )
        )
    return DataStats(columns=columns, total_rows=data.row_count, total_columns=data.column_count)
