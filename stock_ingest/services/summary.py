from __future__ import annotations

from ..models.batch_result import BatchResult
from ..models.parse_result import ParseResult

"""SUMMARY line rendering for the CLI.

Per file:
SUMMARY file={name} format={fmt} platform={platform} confidence={c}
rows={total} valid={valid} skipped={skipped} success={true|false}

Per batch:
SUMMARY files={n} success={ok} failed={failed} rows={total} valid={valid}
skipped={skipped} elapsed_sec={elapsed}
"""


def _format_number(value: float) -> str:
    """Integers without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 4))


def render_summary_line(file_name: str, result: ParseResult) -> str:
    """Render the SUMMARY line of one parsed file.

    Examples:
        >>> from stock_ingest.models import ParseMetadata, ParseResult
        >>> meta = ParseMetadata(total_rows=3, valid_rows=2, skipped_rows=1,
        ...     detected_platform="generic", confidence=0.25, file_format="csv")
        >>> render_summary_line("stock.csv", ParseResult(True, [], [], [], meta))
        'SUMMARY file=stock.csv format=csv platform=generic confidence=0.25 rows=3 valid=2 skipped=1 success=true'
    """
    meta = result.metadata
    return (
        f"SUMMARY file={file_name} "
        f"format={meta.file_format} "
        f"platform={meta.detected_platform} "
        f"confidence={_format_number(meta.confidence)} "
        f"rows={meta.total_rows} "
        f"valid={meta.valid_rows} "
        f"skipped={meta.skipped_rows} "
        f"success={'true' if result.success else 'false'}"
    )


def render_batch_summary(batch: BatchResult) -> str:
    """Render the SUMMARY line aggregating a batch of files."""
    return (
        f"SUMMARY files={batch.total_files} "
        f"success={batch.success_files} "
        f"failed={batch.failed_files} "
        f"rows={batch.total_rows} "
        f"valid={batch.valid_rows} "
        f"skipped={batch.skipped_rows} "
        f"elapsed_sec={_format_number(batch.elapsed_seconds)}"
    )
