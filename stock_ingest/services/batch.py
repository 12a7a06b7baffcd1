from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import DiagnosticLogBuffer
from ..models.batch_result import BatchResult, FileStat
from ..models.parse_result import ParseResult
from ..readers.detect import EXTENSION_FORMATS
from .engine import StockReportParser
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Batch runner: parse several stock reports serially and aggregate figures.

Used by the CLI. Each file goes through StockReportParser.parse_file on its
own; an unusable file is counted as failed and never stops the batch.
"""


class BatchError(Exception):
    """Fatal input problem (path missing, unreadable directory)."""
    pass


def collect_files(paths: list[Path]) -> list[Path]:
    """Expand the given paths into the list of files to parse.

    Files are taken as-is whatever their extension; directories contribute
    their files (non-recursive) with a known report extension, sorted by name.

    Raises:
        BatchError: a path does not exist or a directory cannot be read
    """
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            raise BatchError(f"path not found: {path}")
        if path.is_dir():
            try:
                entries = sorted(p for p in path.iterdir() if p.is_file())
            except OSError as e:
                raise BatchError(f"error reading directory {path}: {e}") from e
            files.extend(p for p in entries if p.suffix.lower().lstrip(".") in EXTENSION_FORMATS)
        else:
            files.append(path)
    return files


def _file_stat(path: Path, result: ParseResult, elapsed: float) -> FileStat:
    meta = result.metadata
    return FileStat(
        file_name=path.name,
        success=result.success,
        file_format=meta.file_format,
        platform=meta.detected_platform,
        total_rows=meta.total_rows,
        valid_rows=meta.valid_rows,
        skipped_rows=meta.skipped_rows,
        elapsed_seconds=elapsed,
        error=result.errors[0] if result.errors else None,
    )


def parse_paths(
    paths: list[Path],
    parser: StockReportParser,
    *,
    error_log: DiagnosticLogBuffer | None = None,
) -> tuple[BatchResult, list[tuple[Path, ParseResult]]]:
    """Parse every file under ``paths``.

    Returns:
        (aggregated BatchResult, [(path, ParseResult)] in input order)

    Raises:
        BatchError: for input paths that cannot be resolved
    """
    start_time = datetime.now(UTC)
    files = collect_files(paths)

    results: list[tuple[Path, ParseResult]] = []
    stats: list[FileStat] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            t0 = time.perf_counter()
            try:
                payload = path.read_bytes()
            except OSError as e:
                raise BatchError(f"cannot read {path}: {e}") from e
            result = parser.parse_file(payload, path.name)
            elapsed = time.perf_counter() - t0
            if error_log is not None:
                error_log.add_result(path.name, result)
            if not result.success:
                logger.warning(f"{path.name}: {'; '.join(result.errors)}")
            results.append((path, result))
            stats.append(_file_stat(path, result, elapsed))
            progress.finish_file(result.metadata.valid_rows, result.metadata.skipped_rows)

    end_time = datetime.now(UTC)
    return (
        BatchResult(
            success_files=sum(1 for s in stats if s.success),
            failed_files=sum(1 for s in stats if not s.success),
            total_rows=sum(s.total_rows for s in stats),
            valid_rows=sum(s.valid_rows for s in stats),
            skipped_rows=sum(s.skipped_rows for s in stats),
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            file_stats=stats,
        ),
        results,
    )
