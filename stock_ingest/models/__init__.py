"""Domain models for the stock-report ingestion engine.

This package contains the record types exchanged between the readers, the
classification services and the callers of parse_file.
"""

from .batch_result import BatchResult, FileStat
from .catalog import Catalog, FieldDefinition, PlatformProfile, Thresholds
from .diagnostic_record import DiagnosticRecord
from .parse_result import ParseMetadata, ParseResult, Suggestions
from .raw_table import RawRow, RawTable
from .row_issue import RowIssue
from .stock_record import StockRecord

__all__ = [
    # Configuration models
    "Catalog",
    "FieldDefinition",
    "PlatformProfile",
    "Thresholds",
    # Extraction models
    "RawRow",
    "RawTable",
    # Result models
    "StockRecord",
    "RowIssue",
    "Suggestions",
    "ParseMetadata",
    "ParseResult",
    "DiagnosticRecord",
    "FileStat",
    "BatchResult",
]
