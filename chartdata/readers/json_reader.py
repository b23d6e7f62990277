from __future__ import annotations

import json
import logging
from typing import Any

from ..models.file_type import FileType
from ..models.parsed_data import ParsedData
from .errors import ParseError

"""JSON reader.

Accepts a top-level array of objects, an object holding such an array one
level down, or a single object (one row). Nested objects are flattened into
dot-joined keys and arrays are kept as compact JSON text.
"""

__all__ = [
    "flatten_record",
    "parse_json",
]

logger = logging.getLogger(__name__)


def flatten_record(obj: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into ``parent.child`` keys.

    >>> flatten_record({"a": {"b": 1}, "tags": [1, 2]})
    {'a.b': 1, 'tags': '[1,2]'}
    """
    result: dict[str, Any] = {}
    for key, value in obj.items():
        new_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            result.update(flatten_record(value, new_key))
        elif isinstance(value, list):
            result[new_key] = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        else:
            result[new_key] = value
    return result


def _follow_path(parsed: Any, array_path: str) -> Any:
    for part in array_path.split("."):
        if isinstance(parsed, dict):
            if part not in parsed:
                raise ParseError(f'Path "{array_path}" not found in JSON')
            parsed = parsed[part]
        elif isinstance(parsed, list) and part.isdigit() and int(part) < len(parsed):
            parsed = parsed[int(part)]
        else:
            raise ParseError(f'Path "{array_path}" not found in JSON')
    return parsed


def _locate_rows(parsed: Any) -> list[Any]:
    if isinstance(parsed, list):
        return parsed
    if not isinstance(parsed, dict):
        raise ParseError("JSON must contain an array of objects")
    for value in parsed.values():
        if isinstance(value, list):
            return value
    # 配列なし: 単一オブジェクトを1行として扱う
    return [parsed]


def parse_json(
    data: bytes,
    file_name: str,
    *,
    array_path: str | None = None,
    flatten_nested: bool = True,
    encoding: str = "utf-8-sig",
) -> ParsedData:
    """Parse a JSON document into a dataset.

    Headers are the union of keys across all records (first-seen order), since
    records may have different shapes.

    Raises:
        ParseError: invalid JSON, a missing array_path, a scalar document, or an
            empty row array
    """
    try:
        parsed = json.loads(data.decode(encoding))
    except (UnicodeDecodeError, LookupError, json.JSONDecodeError) as e:
        raise ParseError(f"JSON parsing failed: {e}", file_name=file_name, file_type="json") from e

    try:
        if array_path:
            parsed = _follow_path(parsed, array_path)
        items = _locate_rows(parsed)
    except ParseError as e:
        raise ParseError(e.message, file_name=file_name, file_type="json") from e

    if not items:
        raise ParseError("JSON array is empty", file_name=file_name, file_type="json")

    rows: list[dict[str, Any]] = []
    for item in items:
        record = item if isinstance(item, dict) else {"value": item}
        rows.append(flatten_record(record) if flatten_nested else dict(record))

    headers: dict[str, None] = {}
    for row in rows:
        for key in row:
            headers.setdefault(key, None)

    logger.debug(f"{file_name}: rows={len(rows)} cols={len(headers)}")
    return ParsedData.from_rows(list(headers), rows, file_name, FileType.JSON)
