from __future__ import annotations

from enum import Enum

"""FileType enum for the ingestion pipeline.

The six supported upload formats. Member values are the lowercase file
extensions, which is also how an uploaded file is routed to its reader.
"""

__all__ = [
    "FileType",
    "SUPPORTED_EXTENSIONS",
    "get_file_extension",
]


def get_file_extension(file_name: str) -> str:
    """Return the lowercase text after the last dot ('' when there is none)."""
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


class FileType(Enum):
    """Supported input formats.

    - CSV / TSV: delimited text
    - XLSX / XLS: spreadsheet workbooks (reported by extension, not content)
    - JSON: array of objects (or an object holding one)
    - XML: repeated row elements
    """
    CSV = "csv"
    TSV = "tsv"
    XLSX = "xlsx"
    XLS = "xls"
    JSON = "json"
    XML = "xml"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_spreadsheet(self) -> bool:
        return self in (FileType.XLSX, FileType.XLS)

    @classmethod
    def from_file_name(cls, file_name: str) -> FileType | None:
        ext = get_file_extension(file_name)
        for member in cls:
            if member.value == ext:
                return member
        return None


_LABELS = {
    FileType.CSV: "CSV (Comma-Separated Values)",
    FileType.TSV: "TSV (Tab-Separated Values)",
    FileType.XLSX: "Excel Workbook (.xlsx)",
    FileType.XLS: "Excel 97-2003 (.xls)",
    FileType.JSON: "JSON (JavaScript Object Notation)",
    FileType.XML: "XML (Extensible Markup Language)",
}

SUPPORTED_EXTENSIONS: list[str] = [ft.value for ft in FileType]
