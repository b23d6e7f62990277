from __future__ import annotations

import csv
import io
import logging
import re
import warnings
from typing import Any

import pandas as pd

from ..models.file_type import FileType
from ..models.parsed_data import ParsedData
from .errors import ParseError

"""Delimited text reader (CSV / TSV).

pandas reads every field as text (object dtype, so no column-wide
inference); dynamic typing is then applied per field, and one dirty cell does
not turn a numeric column into strings. Field-count mismatches are tolerated: short rows are padded with
None and long rows are cut to the header width.
"""

__all__ = [
    "parse_csv",
    "parse_tsv",
]

logger = logging.getLogger(__name__)

_FLOAT_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_INT_RE = re.compile(r"^\s*-?\d+\s*$")


def _dynamic_value(text: str) -> Any:
    if text in ("true", "TRUE"):
        return True
    if text in ("false", "FALSE"):
        return False
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    if text == "":
        return None
    return text


def _literal_sep(delimiter: str) -> str:
    # python engine は2文字以上の sep を正規表現として扱う
    return re.escape(delimiter) if len(delimiter) > 1 else delimiter


def parse_csv(
    data: bytes,
    file_name: str,
    *,
    delimiter: str = ",",
    header: bool = True,
    skip_empty_lines: bool = True,
    dynamic_typing: bool = True,
    encoding: str = "utf-8-sig",
    file_type: FileType = FileType.CSV,
) -> ParsedData:
    """Parse delimited text into a dataset.

    Parameters
    ----------
    data: raw file bytes
    file_name: original file name (reported back in the dataset)
    delimiter: field separator
    header: treat the first non-blank line as column names
    skip_empty_lines: drop blank lines instead of producing empty rows
    dynamic_typing: convert numeric / boolean looking fields
    encoding: text encoding (utf-8-sig strips a BOM)
    file_type: CSV or TSV, reported as is

    Raises
    ------
    ParseError: undecodable bytes or a structural parser error (e.g. an
        unterminated quoted field)
    """
    label = file_type.value.upper()
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ParseError(
            f"{label} parsing failed: {e}", file_name=file_name, file_type=file_type.value
        ) from e

    try:
        with warnings.catch_warnings():
            # index_col=False: pandas cuts long rows to the header width (ParserWarning)
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                sep=_literal_sep(delimiter),
                header=0 if header else None,
                index_col=False,
                dtype=object,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=skip_empty_lines,
                engine="python",
            )
    except pd.errors.EmptyDataError:
        logger.debug(f"{file_name}: no content, returning empty dataset")
        return ParsedData.from_rows([], [], file_name, file_type)
    except (pd.errors.ParserError, csv.Error, ValueError) as e:
        raise ParseError(
            f"{label} parsing failed: {e}", file_name=file_name, file_type=file_type.value
        ) from e

    if header:
        columns = [str(c) for c in df.columns]
    else:
        columns = [f"Column {i + 1}" for i in range(len(df.columns))]

    rows: list[dict[str, Any]] = []
    for values in df.itertuples(index=False, name=None):
        row: dict[str, Any] = {}
        for col, val in zip(columns, values, strict=False):
            if not isinstance(val, str):
                # 欠落フィールド (短い行) は None で埋められる
                row[col] = None
            elif dynamic_typing:
                row[col] = _dynamic_value(val)
            else:
                row[col] = val
        rows.append(row)

    return ParsedData.from_rows(columns, rows, file_name, file_type)


def parse_tsv(data: bytes, file_name: str, **options: Any) -> ParsedData:
    """parse_csv with a tab delimiter, reported as TSV."""
    options.pop("delimiter", None)
    return parse_csv(data, file_name, delimiter="\t", file_type=FileType.TSV, **options)
