from __future__ import annotations

import logging
import statistics
from collections.abc import Callable, Sequence
from typing import Any

from ..models.aggregation import UNKNOWN_GROUP, AggregationType, TrendLine
from .coercion import is_missing, to_display_string, to_number

"""Grouping / aggregation engine feeding the chart renderers.

aggregate() never fails on data: values that do not coerce to numbers are
left out of their group's numeric set, and a group with nothing left reduces
to 0. Groups come back in the order their key first appears in the rows.
"""

__all__ = [
    "aggregate",
    "reduce_values",
    "trend_line",
]

logger = logging.getLogger(__name__)

Number = int | float


_REDUCERS: dict[AggregationType, Callable[[list[Number]], Number]] = {
    AggregationType.SUM: sum,
    AggregationType.AVERAGE: statistics.fmean,
    AggregationType.COUNT: len,
    AggregationType.MIN: min,
    AggregationType.MAX: max,
    AggregationType.MEDIAN: statistics.median,  # 偶数個の場合は中央2値の平均
    AggregationType.FIRST: lambda values: values[0],
    AggregationType.LAST: lambda values: values[-1],
}


def reduce_values(values: list[Number], aggregation: AggregationType | str) -> Number:
    """Reduce one group's numeric values; an empty group reduces to 0."""
    agg = AggregationType.parse(aggregation)
    if agg is AggregationType.NONE:
        raise ValueError("aggregation 'none' does not reduce values")
    if not values:
        return 0
    return _REDUCERS[agg](values)


def aggregate(
    rows: Sequence[dict[str, Any]],
    group_column: str,
    value_column: str,
    aggregation: AggregationType | str,
) -> list[dict[str, Any]]:
    """Group rows by group_column and reduce value_column in each group.

    Args:
        rows: dataset records (ParsedData.rows)
        group_column: column whose display string is the group key
        value_column: column coerced to numbers and reduced
        aggregation: reduction to apply; "none" returns rows unchanged

    Returns:
        One ``{group_column: key, value_column: number}`` dict per group,
        in first-appearance order (or the input rows for "none").

    Raises:
        ValueError: unknown aggregation name, or group_column and value_column are
            the same column (never raised for dirty data)
    """
    agg = AggregationType.parse(aggregation)
    if group_column == value_column:
        raise ValueError(f"group and value column must differ: {group_column!r}")
    if agg is AggregationType.NONE:
        return rows  # type: ignore[return-value]

    groups: dict[str, list[Number]] = {}
    skipped = 0
    for row in rows:
        raw_key = row.get(group_column)
        key = UNKNOWN_GROUP if is_missing(raw_key) else to_display_string(raw_key)
        bucket = groups.setdefault(key, [])
        number = to_number(row.get(value_column))
        if number is None:
            skipped += 1
            continue
        bucket.append(number)

    if skipped:
        logger.debug(f"aggregate: {skipped} non-numeric '{value_column}' values left out")

    return [
        {group_column: key, value_column: reduce_values(values, agg)}
        for key, values in groups.items()
    ]


def trend_line(rows: Sequence[dict[str, Any]], x_column: str, y_column: str) -> TrendLine | None:
    """Ordinary least-squares line through the rows' (x, y) points.

    Rows where either value does not coerce to a number are ignored. Returns
    None with fewer than two points or when all x values are equal.
    """
    points: list[tuple[float, float]] = []
    for row in rows:
        x = to_number(row.get(x_column))
        y = to_number(row.get(y_column))
        if x is None or y is None:
            continue
        points.append((float(x), float(y)))

    n = len(points)
    if n < 2:
        return None
    sum_x = sum(p[0] for p in points)
    sum_y = sum(p[1] for p in points)
    sum_xy = sum(p[0] * p[1] for p in points)
    sum_xx = sum(p[0] * p[0] for p in points)

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return None
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    min_x = min(p[0] for p in points)
    max_x = max(p[0] for p in points)
    return TrendLine(
        slope=slope,
        intercept=intercept,
        min_x=min_x,
        max_x=max_x,
        start_y=slope * min_x + intercept,
        end_y=slope * max_x + intercept,
    )
