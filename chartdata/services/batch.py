from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer, record_for_exception
from ..models.config_models import IngestConfig
from ..models.file_type import FileType
from ..models.parsed_data import ParsedData
from ..models.processing_result import FileStat, ProcessingResult
from ..readers.errors import IngestError
from .ingest import ingest_file
from .progress import ProgressTracker

"""Batch ingestion for the command line runner.

Files are ingested one by one; a failing file is recorded (log line +
error log record) and the batch moves on to the next file.
"""

__all__ = [
    "process_files",
]

logger = logging.getLogger(__name__)

DatasetHandler = Callable[[ParsedData], None]


def _file_type_label(path: Path) -> str | None:
    ft = FileType.from_file_name(path.name)
    return ft.value if ft else None


def process_files(
    paths: Sequence[Path],
    config: IngestConfig,
    *,
    on_dataset: DatasetHandler | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Ingest every path and collect per-file statistics.

    Args:
        paths: files to ingest, in order
        config: reader options and size limit
        on_dataset: called with each successfully ingested dataset
        error_log: buffer receiving one record per failed file (flushed here)

    Returns:
        ProcessingResult with counts, total rows and per-file stats
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0

    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            file_type = _file_type_label(path)
            progress.start_file(path, file_type)
            file_start = datetime.now(UTC)
            try:
                data = ingest_file(path, config)
            except (IngestError, OSError) as e:
                if not isinstance(e, IngestError):
                    logger.warning(f"{path.name}: {e}")
                error_log.append(record_for_exception(path.name, file_type, e))
                failed_count += 1
                elapsed = (datetime.now(UTC) - file_start).total_seconds()
                file_stats.append(
                    FileStat(
                        file_name=path.name,
                        status="failed",
                        file_type=file_type,
                        row_count=0,
                        column_count=0,
                        elapsed_seconds=elapsed,
                        error=str(e),
                    )
                )
                progress.finish_file(failed=True)
                continue

            success_count += 1
            if on_dataset is not None:
                on_dataset(data)
            elapsed = (datetime.now(UTC) - file_start).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status="success",
                    file_type=data.file_type.value,
                    row_count=data.row_count,
                    column_count=data.column_count,
                    elapsed_seconds=elapsed,
                )
            )
            progress.finish_file(rows=data.row_count)

    try:
        log_path = error_log.flush()
    except OSError as e:
        # エラーログの書き込み失敗でバッチ全体は失敗させない
        logger.warning(f"failed to write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=progress.total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
