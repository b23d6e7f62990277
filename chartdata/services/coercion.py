from __future__ import annotations

import math
import numbers
from datetime import date, datetime
from typing import Any

import pandas as pd

"""Best-effort cell value coercion.

None of these functions raise on dirty data: a value that cannot be coerced
comes back as None, and callers decide whether to skip or count it.
"""

__all__ = [
    "is_missing",
    "to_number",
    "to_display_string",
]

# Stripped before numeric parsing: currency, percent, thousands separators
_NUMERIC_NOISE = str.maketrans("", "", "$%,")


def is_missing(value: Any) -> bool:
    """True for None, empty strings and pandas/float NaN or NaT."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _is_real(value: Any) -> bool:
    # bool is an int subclass but is never a number for charting purposes
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def to_number(value: Any) -> int | float | None:
    """Coerce a cell to a number, or None when it is not one.

    >>> to_number("$1,234.50")
    1234.5
    >>> to_number("12%")
    12.0
    >>> to_number("abc") is None
    True
    """
    if _is_real(value):
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    if not isinstance(value, str):
        return None
    cleaned = value.translate(_NUMERIC_NOISE).strip()
    if not cleaned or "_" in cleaned:
        return None
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def to_display_string(value: Any) -> str:
    """Render a cell as the string used for group keys and header names."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
