from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Batch result models for the CLI batch runner.

Aggregates per-file parse outcomes into the figures printed on the SUMMARY
line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    success: bool
    file_format: str
    platform: str
    total_rows: int
    valid_rows: int
    skipped_rows: int
    elapsed_seconds: float
    error: str | None = None  # first file-level error, if any


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of parsing several files."""
    success_files: int  # files with at least one valid row
    failed_files: int  # files with no valid row (including unreadable files)
    total_rows: int
    valid_rows: int
    skipped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
