from __future__ import annotations

"""Ingestion error hierarchy.

File-level failures only. A dirty cell is never an error: coercion misses are
returned as None and absorbed by the data model.
"""

__all__ = [
    "IngestError",
    "UnsupportedFormatError",
    "SizeExceededError",
    "ParseError",
]


class IngestError(Exception):
    """Base class: the whole file is rejected, no partial dataset."""

    error_type = "INGEST_ERROR"

    def __init__(self, message: str, *, file_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.file_name = file_name


class UnsupportedFormatError(IngestError):
    """Raised when the file extension is not one of the supported formats."""

    error_type = "UNSUPPORTED_FORMAT"


class SizeExceededError(IngestError):
    """Raised when the file is larger than the configured limit."""

    error_type = "SIZE_EXCEEDED"

    def __init__(
        self, message: str, *, size_bytes: int, max_size_mb: float, file_name: str | None = None
    ) -> None:
        super().__init__(message, file_name=file_name)
        self.size_bytes = size_bytes
        self.max_size_mb = max_size_mb


class ParseError(IngestError):
    """Raised when a reader cannot interpret the file's structure."""

    error_type = "PARSE_ERROR"

    def __init__(self, message: str, *, file_name: str | None = None, file_type: str | None = None) -> None:
        super().__init__(message, file_name=file_name)
        self.file_type = file_type
