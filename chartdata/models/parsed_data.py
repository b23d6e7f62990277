from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .file_type import FileType

"""ParsedData model: the uniform output of every format reader.

Each reader turns its own notion of "a row" into plain dict records; this
module is the single place where those records are packaged into headers,
rows, a positional raw matrix and the row/column counts.
"""

__all__ = [
    "ParsedData",
    "unique_column_names",
]


def unique_column_names(names: Iterable[str]) -> list[str]:
    """Suffix repeated names with _1, _2, ... keeping the first one as is.

    >>> unique_column_names(["id", "name", "name", "name"])
    ['id', 'name', 'name_1', 'name_2']
    """
    counts: dict[str, int] = {}
    taken = set()
    result: list[str] = []
    for name in names:
        candidate = name
        while candidate in taken:
            counts[name] = counts.get(name, 0) + 1
            candidate = f"{name}_{counts[name]}"
        taken.add(candidate)
        result.append(candidate)
    return result


def _unique_headers(headers: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for h in headers:
        name = str(h)
        if name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class ParsedData:
    """In-memory dataset produced once per uploaded file.

    Invariants:
    - row_count == len(rows), column_count == len(headers)
    - raw_data[i][j] == rows[i].get(headers[j]) (None marks an absent value)
    """
    headers: list[str]
    rows: list[dict[str, Any]]
    raw_data: list[list[Any]]
    file_name: str
    file_type: FileType
    row_count: int = 0
    column_count: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)  # reader specific (sheet name など)

    @classmethod
    def from_rows(
        cls,
        headers: Iterable[str],
        rows: list[dict[str, Any]],
        file_name: str,
        file_type: FileType,
        metadata: dict[str, Any] | None = None,
    ) -> ParsedData:
        """Build a dataset from reader output, deriving raw_data and counts."""
        unique = _unique_headers(headers)
        raw = [[row.get(h) for h in unique] for row in rows]
        return cls(
            headers=unique,
            rows=rows,
            raw_data=raw,
            file_name=file_name,
            file_type=file_type,
            row_count=len(rows),
            column_count=len(unique),
            metadata=dict(metadata or {}),
        )

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    def column_values(self, header: str) -> list[Any]:
        if header not in self.headers:
            raise KeyError(header)
        return [row.get(header) for row in self.rows]

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys stored in saved dashboards."""
        return {
            "headers": list(self.headers),
            "rows": [_jsonable(r) for r in self.rows],
            "rawData": [_jsonable(r) for r in self.raw_data],
            "fileName": self.file_name,
            "fileType": self.file_type.value,
            "rowCount": self.row_count,
            "columnCount": self.column_count,
        }
