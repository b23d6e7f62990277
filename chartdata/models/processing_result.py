from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Batch ingestion result models (used by the command line runner).

A batch is a list of files ingested one after another; each file either
yields a dataset or fails as a whole.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file ingestion statistics."""
    file_name: str
    status: str  # success/failed
    file_type: str | None  # None when the extension was rejected
    row_count: int
    column_count: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for one batch, feeding the SUMMARY line."""
    success_files: int
    failed_files: int
    total_rows: int  # 成功ファイルの行数合計
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
