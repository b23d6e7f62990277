from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Column classification models.

ColumnType is derived, never stored: it is recomputed from a column's values
whenever a preview table or the aggregation step asks for it.
"""

__all__ = [
    "ColumnType",
    "ColumnInfo",
    "DataStats",
]


class ColumnType(Enum):
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    STRING = "string"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ColumnInfo:
    """Per-column profile shown next to the data preview."""
    name: str
    type: ColumnType
    sample_values: list[Any]  # 先頭の非欠損値 (最大5件)
    null_count: int


@dataclass(frozen=True)
class DataStats:
    columns: list[ColumnInfo]
    total_rows: int
    total_columns: int

    def numeric_columns(self) -> list[str]:
        """Columns suitable for value axes."""
        return [c.name for c in self.columns if c.type is ColumnType.NUMBER]

    def categorical_columns(self) -> list[str]:
        """Columns suitable for category axes (everything that is not numeric)."""
        return [c.name for c in self.columns if c.type is not ColumnType.NUMBER]

    def get(self, name: str) -> ColumnInfo | None:
        for c in self.columns:
            if c.name == name:
                return c
        return None
