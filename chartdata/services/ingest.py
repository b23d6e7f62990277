from __future__ import annotations

import logging
from pathlib import Path

from ..models.config_models import IngestConfig
from ..models.file_type import SUPPORTED_EXTENSIONS, FileType, get_file_extension
from ..models.parsed_data import ParsedData
from ..readers.csv_reader import parse_csv, parse_tsv
from ..readers.errors import IngestError, SizeExceededError, UnsupportedFormatError
from ..readers.excel_reader import parse_excel
from ..readers.json_reader import parse_json
from ..readers.xml_reader import parse_xml

"""Ingestion entry points.

The file name decides the reader (by extension) and the size limit is
checked before any content is read. Every failure is terminal for the file:
either a complete ParsedData comes back or an IngestError is raised.
"""

__all__ = [
    "detect_file_type",
    "check_file_size",
    "parse_bytes",
    "ingest_bytes",
    "ingest_file",
]

logger = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024


def detect_file_type(file_name: str) -> FileType:
    """Map a file name to its format.

    Raises:
        UnsupportedFormatError: the extension is not supported
    """
    file_type = FileType.from_file_name(file_name)
    if file_type is None:
        ext = get_file_extension(file_name)
        raise UnsupportedFormatError(
            f"Unsupported file type: .{ext}. Supported types: {', '.join(SUPPORTED_EXTENSIONS)}",
            file_name=file_name,
        )
    return file_type


def check_file_size(size_bytes: int, max_size_mb: float | None, file_name: str | None = None) -> None:
    """Reject sizes above max_size_mb (None disables the check).

    Raises:
        SizeExceededError: with the file size and the limit in the message
    """
    if max_size_mb is None:
        return
    if size_bytes <= max_size_mb * _BYTES_PER_MB:
        return
    size_mb = size_bytes / _BYTES_PER_MB
    limit = f"{max_size_mb:g}"
    raise SizeExceededError(
        f"File size ({size_mb:.2f}MB) exceeds maximum allowed size ({limit}MB)",
        size_bytes=size_bytes,
        max_size_mb=max_size_mb,
        file_name=file_name,
    )


def parse_bytes(data: bytes, file_name: str, file_type: FileType, config: IngestConfig) -> ParsedData:
    """Dispatch already-validated content to its format reader."""
    if file_type is FileType.CSV:
        return parse_csv(
            data,
            file_name,
            delimiter=config.delimiter,
            header=config.header,
            skip_empty_lines=config.skip_empty_lines,
            dynamic_typing=config.dynamic_typing,
            encoding=config.encoding,
        )
    if file_type is FileType.TSV:
        return parse_tsv(
            data,
            file_name,
            header=config.header,
            skip_empty_lines=config.skip_empty_lines,
            dynamic_typing=config.dynamic_typing,
            encoding=config.encoding,
        )
    if file_type.is_spreadsheet:
        return parse_excel(
            data,
            file_name,
            sheet_index=config.sheet_index,
            sheet_name=config.sheet_name,
            header=config.header,
        )
    if file_type is FileType.JSON:
        return parse_json(
            data,
            file_name,
            array_path=config.json_array_path,
            flatten_nested=config.flatten_nested,
            encoding=config.encoding,
        )
    if file_type is FileType.XML:
        return parse_xml(
            data,
            file_name,
            row_path=config.xml_row_path,
            attribute_prefix=config.xml_attribute_prefix,
        )
    raise UnsupportedFormatError(f"Parser not implemented for: {file_type.value}", file_name=file_name)


def _log_result(data: ParsedData) -> None:
    logger.info(
        f"ingested {data.file_name} type={data.file_type.value} rows={data.row_count} cols={data.column_count}"
    )


def ingest_bytes(data: bytes, file_name: str, config: IngestConfig | None = None) -> ParsedData:
    """Ingest an in-memory upload.

    Args:
        data: complete file content
        file_name: original name; only its extension is used for routing
        config: reader options and size limit (defaults when omitted)

    Raises:
        UnsupportedFormatError, SizeExceededError, ParseError
    """
    config = config or IngestConfig()
    try:
        file_type = detect_file_type(file_name)
        check_file_size(len(data), config.max_size_mb, file_name)
        result = parse_bytes(data, file_name, file_type, config)
    except IngestError as e:
        logger.warning(f"{file_name}: {e}")
        raise
    _log_result(result)
    return result


def ingest_file(path: Path | str, config: IngestConfig | None = None) -> ParsedData:
    """Ingest a file from disk.

    Format and size are checked from the name and stat() before the file is
    opened, so rejected files are never read.

    Raises:
        UnsupportedFormatError, SizeExceededError, ParseError
        OSError: the file cannot be read
    """
    path = Path(path)
    config = config or IngestConfig()
    try:
        file_type = detect_file_type(path.name)
        check_file_size(path.stat().st_size, config.max_size_mb, path.name)
        result = parse_bytes(path.read_bytes(), path.name, file_type, config)
    except IngestError as e:
        logger.warning(f"{path.name}: {e}")
        raise
    _log_result(result)
    return result
