from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .row_issue import RowIssue
from .stock_record import StockRecord

"""Parse result models for the stock-report ingestion engine.

ParseResult is produced once per parse call and is read-only for callers.
to_dict() renders the serializable shape consumed by the upload endpoint.
"""

__all__ = [
    "Suggestions",
    "ParseMetadata",
    "ParseResult",
]


@dataclass(frozen=True)
class Suggestions:
    """Hints for manual remediation of the column mapping."""
    possible_sku: list[str] = field(default_factory=list)  # unmapped headers that look like a SKU
    possible_stock: list[str] = field(default_factory=list)  # unmapped headers that look like stock
    unmapped_columns: list[str] = field(default_factory=list)  # headers not mapped to any field

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "possibleSku": list(self.possible_sku),
            "possibleStock": list(self.possible_stock),
            "unmappedColumns": list(self.unmapped_columns),
        }


@dataclass(frozen=True)
class ParseMetadata:
    """Counts and detection results for one parsed file."""
    total_rows: int = 0  # raw rows extracted
    valid_rows: int = 0  # accepted rows
    skipped_rows: int = 0  # total_rows - valid_rows
    detected_platform: str = "unknown"
    confidence: float = 0.0  # platform confidence, 0..1
    file_format: str = "unknown"
    encoding: str = "utf-8"
    detected_columns: dict[str, str] = field(default_factory=dict)  # field -> header
    suggestions: Suggestions = field(default_factory=Suggestions)
    delimiter: str | None = None  # delimited/plain-text inputs only

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "skippedRows": self.skipped_rows,
            "detectedPlatform": self.detected_platform,
            "confidence": self.confidence,
            "fileFormat": self.file_format,
            "encoding": self.encoding,
            "detectedColumns": dict(self.detected_columns),
            "suggestions": self.suggestions.to_dict(),
        }
        if self.delimiter is not None:
            out["delimiter"] = self.delimiter
        return out


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one stock report.

    success is True when at least one row was accepted. errors carries
    file-level problems, warnings carries row-level problems; issues holds the
    same diagnostics in structured form.
    """
    success: bool
    data: list[StockRecord]
    errors: list[str]
    warnings: list[str]
    metadata: ParseMetadata
    issues: list[RowIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "data": [r.to_dict() for r in self.data],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "metadata": self.metadata.to_dict(),
        }
