from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic_record import DiagnosticRecord
from ..models.parse_result import ParseResult

"""Diagnostic log buffering.

Row-level and file-level issues of every parsed file are buffered as
DiagnosticRecords and written as JSON Lines to
<dir>/diagnostics-YYYYMMDD-HHMMSS.log (UTC) on flush.
"""

__all__ = [
    "DiagnosticRecord",
    "DiagnosticLogBuffer",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DiagnosticLogBuffer:
    """In-memory buffer of diagnostic records; flush() appends JSON Lines.

    The file path is fixed on first access. Not thread-safe (the batch runner
    is serial).
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._records: list[DiagnosticRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.directory / f"diagnostics-{stamp}.log"
        return self._file_path

    def append(self, record: DiagnosticRecord) -> None:
        self._records.append(record)

    def add_result(self, file_name: str, result: ParseResult) -> int:
        """Buffer every issue of ``result``; returns how many were added."""
        for issue in result.issues:
            self.append(DiagnosticRecord.create(file_name, issue))
        return len(result.issues)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
