"""Universal stock-report ingestion engine.

    >>> from stock_ingest import parse_file
    >>> result = parse_file(b"SKU,Quantity\\nabc-1,5\\n", "stock.csv")
    >>> result.success, result.data[0].sku, result.data[0].current_stock
    (True, 'ABC-1', 5)
"""

from .models import ParseMetadata, ParseResult, RowIssue, StockRecord, Suggestions
from .services.engine import StockReportParser, parse_file

__all__ = [
    "parse_file",
    "StockReportParser",
    "ParseResult",
    "ParseMetadata",
    "Suggestions",
    "StockRecord",
    "RowIssue",
]

__version__ = "0.1.0"
