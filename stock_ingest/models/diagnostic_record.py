from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .row_issue import RowIssue

"""DiagnosticRecord model for the operator error log.

A DiagnosticRecord is the timestamped, JSON Lines form of a RowIssue. It is
only created when diagnostics are written out, so ParseResult itself stays
free of timestamps and identical across repeated parses.
"""

__all__ = [
    "DiagnosticRecord",
]


@dataclass(frozen=True)
class DiagnosticRecord:
    """Structured diagnostic record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: name of the uploaded file
        row: 1-based data row number. -1 for file-level issues
        field: semantic field concerned, or None
        issue_type: classification in UPPER_SNAKE_CASE format
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    field: str | None
    issue_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, issue: RowIssue) -> DiagnosticRecord:
        """Create a record for ``issue`` stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return DiagnosticRecord(
            timestamp=ts,
            file=file,
            row=issue.row,
            field=issue.field,
            issue_type=issue.issue_type,
            message=issue.message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with a fixed key set."""
        return json.dumps(asdict(self), ensure_ascii=False)
