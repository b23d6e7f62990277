from __future__ import annotations

from dataclasses import dataclass

"""Ingestion configuration dataclass.

Passed explicitly into the ingestion entry points instead of living as
module-level constants. The YAML loader in chartdata.config.loader builds it;
code that does not need a config file uses the defaults directly.
"""

DEFAULT_MAX_SIZE_MB = 50.0


@dataclass(frozen=True)
class IngestConfig:
    """Options for size checking and for each format reader.

    Reader options only apply to the formats they name; the rest are ignored.
    """
    max_size_mb: float | None = DEFAULT_MAX_SIZE_MB  # None disables the size check
    # Delimited text
    delimiter: str = ","  # TSV always uses a tab
    header: bool = True  # First line/row holds the column names (CSV/TSV/Excel)
    skip_empty_lines: bool = True
    dynamic_typing: bool = True  # "10" -> 10, "true" -> True
    encoding: str = "utf-8-sig"
    # Spreadsheet
    sheet_index: int = 0
    sheet_name: str | None = None  # 指定時は sheet_index より優先
    # JSON
    json_array_path: str | None = None  # Dot path to the row array, e.g. "data.items"
    flatten_nested: bool = True
    # XML
    xml_row_path: str | None = None  # ElementTree path, e.g. ".//record"
    xml_attribute_prefix: str = "@"

    @property
    def max_size_bytes(self) -> int | None:
        if self.max_size_mb is None:
            return None
        return int(self.max_size_mb * 1024 * 1024)
