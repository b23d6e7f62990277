from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the per-run ingestion error log.

One record per file that could not be ingested. The JSON Lines schema is
fixed: exactly the dataclass fields, no extra keys.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: File name that failed to ingest
        file_type: Detected format, or "" when the extension is not supported
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable diagnostic (the exception message)
    """
    timestamp: str  # ISO8601 UTC
    file: str
    file_type: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, file_type: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            file_type=file_type,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
