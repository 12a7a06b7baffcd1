from __future__ import annotations

from dataclasses import dataclass

"""RowIssue model: structured diagnostic attached to a ParseResult.

row=-1 is the sentinel for file-level issues where no data row applies
(fatal extraction, empty file, no valid rows).
"""

__all__ = [
    "RowIssue",
    "FATAL_EXTRACTION",
    "NO_DATA_ROWS",
    "NO_VALID_ROWS",
    "MISSING_REQUIRED_FIELD",
    "INVALID_VALUE",
    "TRANSFORM_ERROR",
    "ROW_ERROR",
]

# File-level
FATAL_EXTRACTION = "FATAL_EXTRACTION"
NO_DATA_ROWS = "NO_DATA_ROWS"
NO_VALID_ROWS = "NO_VALID_ROWS"
# Row-level
MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
INVALID_VALUE = "INVALID_VALUE"
TRANSFORM_ERROR = "TRANSFORM_ERROR"
ROW_ERROR = "ROW_ERROR"


@dataclass(frozen=True)
class RowIssue:
    """One diagnostic produced while parsing a file.

    Attributes:
        row: 1-based data row number, or -1 for file-level issues
        field: semantic field concerned (None when the whole row/file is affected)
        issue_type: classification in UPPER_SNAKE_CASE
        message: human readable text, identical to the warnings/errors entry
    """
    row: int
    field: str | None
    issue_type: str
    message: str

    @property
    def file_level(self) -> bool:
        return self.row == -1

    def __str__(self) -> str:
        return self.message
