from __future__ import annotations

import io
import logging
from typing import Any

import pandas as pd

from ..models.file_type import FileType, get_file_extension
from ..models.parsed_data import ParsedData, unique_column_names
from ..services.coercion import to_display_string
from .errors import ParseError

"""Spreadsheet reader (XLSX / XLS).

pandas picks the engine from the workbook content (openpyxl for xlsx, xlrd
for legacy xls); the reported file type follows the file name instead, so an
xlsx workbook uploaded as "report.xls" is still reported as xls.
"""

__all__ = [
    "get_sheet_names",
    "read_sheet",
    "normalize_sheet",
    "parse_excel",
]

logger = logging.getLogger(__name__)


def _open_workbook(data: bytes) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(io.BytesIO(data))
    except Exception as e:  # openpyxl / xlrd / zipfile raise unrelated types
        raise ParseError(f"Excel parsing failed: {e}") from e


def get_sheet_names(data: bytes) -> list[str]:
    """Return the workbook's sheet names in workbook order."""
    with _open_workbook(data) as xls:
        return [str(name) for name in xls.sheet_names]


def read_sheet(data: bytes, sheet_index: int = 0, sheet_name: str | None = None) -> tuple[str, pd.DataFrame]:
    """Read one sheet as a raw, header-less DataFrame.

    sheet_name wins over sheet_index when both are given.

    Raises:
        ParseError: unreadable workbook, or the requested sheet does not exist
    """
    with _open_workbook(data) as xls:
        names = [str(n) for n in xls.sheet_names]
        if sheet_name:
            target = sheet_name if sheet_name in names else None
        else:
            target = names[sheet_index] if 0 <= sheet_index < len(names) else None
        if target is None:
            raise ParseError("Sheet not found in workbook")
        try:
            # ヘッダなしで生読み (後で1行目をヘッダとして適用)
            df = xls.parse(xls.sheet_names[names.index(target)], header=None)
        except Exception as e:
            raise ParseError(f"Excel parsing failed: {e}") from e
    return target, df


def _cell(value: Any) -> Any:
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if pd.isna(value):
        return None
    return value


def normalize_sheet(df: pd.DataFrame, header: bool = True) -> tuple[list[str], list[dict[str, Any]]]:
    """Turn a raw sheet into (columns, rows).

    Steps:
    1. First row becomes the header (blank header cells -> "Column N")
    2. Remaining rows become records; entirely blank rows are skipped
    3. Blank cells become None, timestamps become datetime
    """
    if df.shape[0] == 0:
        return [], []
    if header:
        names = []
        for i, v in enumerate(df.iloc[0].tolist()):
            names.append(f"Column {i + 1}" if pd.isna(v) else to_display_string(v).strip())
        columns = unique_column_names(names)
        data_part = df.iloc[1:]
    else:
        columns = [f"Column {i + 1}" for i in range(df.shape[1])]
        data_part = df

    rows: list[dict[str, Any]] = []
    for _, raw in data_part.iterrows():
        if raw.isna().all():
            continue
        rows.append({col: _cell(val) for col, val in zip(columns, raw.tolist(), strict=False)})
    return columns, rows


def parse_excel(
    data: bytes,
    file_name: str,
    *,
    sheet_index: int = 0,
    sheet_name: str | None = None,
    header: bool = True,
) -> ParsedData:
    """Parse one workbook sheet into a dataset.

    Raises:
        ParseError: unreadable workbook, missing sheet, or no data rows
    """
    file_type = FileType.XLS if get_file_extension(file_name) == "xls" else FileType.XLSX
    try:
        target, df = read_sheet(data, sheet_index=sheet_index, sheet_name=sheet_name)
    except ParseError as e:
        raise ParseError(e.message, file_name=file_name, file_type=file_type.value) from e

    columns, rows = normalize_sheet(df, header=header)
    if not rows:
        raise ParseError("No data found in the Excel file", file_name=file_name, file_type=file_type.value)

    logger.debug(f"{file_name}: sheet '{target}' rows={len(rows)} cols={len(columns)}")
    return ParsedData.from_rows(columns, rows, file_name, file_type, metadata={"sheet_name": target})
