from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Aggregation models used before charting."""

__all__ = [
    "AggregationType",
    "TrendLine",
    "UNKNOWN_GROUP",
]

# Group key used when a row has no value in the grouping column
UNKNOWN_GROUP = "Unknown"


class AggregationType(Enum):
    NONE = "none"
    SUM = "sum"
    AVERAGE = "average"
    COUNT = "count"
    MIN = "min"
    MAX = "max"
    MEDIAN = "median"
    FIRST = "first"
    LAST = "last"

    @classmethod
    def parse(cls, value: AggregationType | str) -> AggregationType:
        """Accept either a member or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown aggregation '{value}' (expected one of: {choices})") from e


@dataclass(frozen=True)
class TrendLine:
    """Least-squares line over (x, y) points, with its endpoints at the x extrema."""
    slope: float
    intercept: float
    min_x: float
    max_x: float
    start_y: float
    end_y: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept
