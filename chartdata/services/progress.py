from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Batch progress bar (tqdm, TTY only).

Shows files done / total with the running row count and failure count as
postfix. Disabled when stdout is not a terminal so piped output only carries
the labeled log lines.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts ingested files and rows; draws them when attached to a TTY."""

    def __init__(self, total_files: int, *, description: str = "Ingesting files") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.failed_files = 0
        self.total_rows = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path, file_type: str | None = None) -> None:
        self.current_file += 1
        if self.pbar is None:
            return
        label = f"{file_path.name} [{file_type}]" if file_type else file_path.name
        self.pbar.set_description(f"{self.description} ({label})")

    def finish_file(self, *, rows: int = 0, failed: bool = False) -> None:
        """Record one finished file; rows only counts for successful files."""
        if failed:
            self.failed_files += 1
        else:
            self.total_rows += rows
        if self.pbar is None:
            return
        self.pbar.update(1)
        self.pbar.set_postfix(rows=self.total_rows, failed=self.failed_files)
        self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
