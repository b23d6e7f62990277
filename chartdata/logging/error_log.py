from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord
from ..readers.errors import IngestError

"""Ingestion error log buffering.

- JSON Lines with a fixed schema (ErrorRecord fields only)
- One file per run: ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC), created lazily
- Records are buffered and written on flush(); nothing is written for a
  clean run
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "record_for_exception",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


def record_for_exception(file_name: str, file_type: str | None, exc: Exception) -> ErrorRecord:
    """Build an ErrorRecord from an ingestion failure.

    IngestError subclasses carry their own error_type; anything else (an
    OSError while reading, for instance) is recorded as READ_ERROR.
    """
    error_type = exc.error_type if isinstance(exc, IngestError) else "READ_ERROR"
    return ErrorRecord.create(
        file=file_name,
        file_type=file_type or "",
        error_type=error_type,
        message=str(exc),
    )


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush writes JSON Lines.

    Single-threaded use only (the runner ingests files one by one).
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the run's log file.

        Returns:
            The log file path, or None when there was nothing to write
        """
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
