from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""RawTable model: output of the format-specific readers.

Rows keep header strings exactly as found (trimmed) so the classifier and the
row normalizer see the same keys.
"""

__all__ = [
    "RawRow",
    "RawTable",
]

RawRow = dict[str, Any]


@dataclass(frozen=True)
class RawTable:
    """Ordered raw rows extracted from one file."""
    headers: list[str]  # header row (or keys of the first row for JSON/XML)
    rows: list[RawRow] = field(default_factory=list)
    delimiter: str | None = None  # delimiter used for text inputs
    source: str | None = None  # sheet name or XML path the rows came from

    def __len__(self) -> int:
        return len(self.rows)
