from __future__ import annotations

import csv
import io
import logging
import re

import pandas as pd

from ..models.raw_table import RawTable
from .table import rows_from_matrix

"""Delimited text reader (CSV / TSV / TXT) and plain-text fallback.

The primary parse goes through pandas with every cell read as text and the
first row applied as header afterwards. When pandas rejects the input (ragged
rows, stray quotes) the same delimiter is used by a manual split parser so a
malformed export still yields rows.
"""

__all__ = [
    "DELIMITER_CANDIDATES",
    "PLAIN_TEXT_DELIMITERS",
    "detect_delimiter",
    "manual_delimited_parse",
    "read_delimited",
    "read_plain_text",
]

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES = (",", ";", "\t", "|")
# space is only tried for text of unknown format
PLAIN_TEXT_DELIMITERS = (",", "\t", ";", "|", " ")

_LINE_SPLIT = re.compile(r"\r?\n")
_EDGE_QUOTES = re.compile(r"^[\"']|[\"']$")


def _non_blank_lines(text: str) -> list[str]:
    return [line for line in _LINE_SPLIT.split(text) if line.strip()]


def detect_delimiter(
    text: str,
    sample_lines: int = 5,
    candidates: tuple[str, ...] = DELIMITER_CANDIDATES,
) -> str:
    """Pick the delimiter giving the most, and most consistent, columns.

    score = average column count * (1 - (max - min) / average) over the first
    ``sample_lines`` non-blank lines. A candidate needs an average above one
    column and must beat the current best strictly, so ties keep the comma.
    """
    lines = _non_blank_lines(text)[:sample_lines]
    best = ","
    best_score = 0.0
    if not lines:
        return best
    for delimiter in candidates:
        counts = [len(line.split(delimiter)) for line in lines]
        avg = sum(counts) / len(counts)
        if avg <= 1:
            continue
        consistency = 1 - (max(counts) - min(counts)) / avg
        score = avg * consistency
        if score > best_score:
            best_score = score
            best = delimiter
    return best


def _strip_quotes(cell: str) -> str:
    return _EDGE_QUOTES.sub("", cell.strip())


def manual_delimited_parse(text: str, delimiter: str) -> RawTable:
    """Split-based parser used when pandas cannot parse the content."""
    lines = _non_blank_lines(text)
    matrix = [[_strip_quotes(cell) for cell in line.split(delimiter)] for line in lines]
    headers, rows = rows_from_matrix(matrix)
    return RawTable(headers=headers, rows=rows, delimiter=delimiter)


def _pandas_parse(text: str, delimiter: str) -> RawTable:
    df = pd.read_csv(
        io.StringIO(text),
        sep=delimiter,
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    headers, rows = rows_from_matrix(df.values.tolist())
    return RawTable(headers=headers, rows=rows, delimiter=delimiter)


def read_delimited(text: str, delimiter: str | None = None, *, sample_lines: int = 5) -> RawTable:
    """Parse delimited text, auto-detecting the delimiter unless one is given."""
    text = text.lstrip("\ufeff")
    if not text.strip():
        return RawTable(headers=[], rows=[], delimiter=delimiter)
    if delimiter is None:
        delimiter = detect_delimiter(text, sample_lines)
    logger.debug(f"delimiter={delimiter!r}")
    try:
        return _pandas_parse(text, delimiter)
    except (ValueError, csv.Error) as e:
        # pandas ParserError / EmptyDataError are ValueError subclasses
        logger.debug(f"pandas parse failed, using manual parser: {e}")
        return manual_delimited_parse(text, delimiter)


def read_plain_text(text: str, *, sample_lines: int = 5) -> RawTable:
    """Best-effort table from text of unknown format.

    Same scoring as delimited files, with space as an extra candidate, so a
    comma file whose headers contain spaces still splits on the comma.
    """
    lines = _non_blank_lines(text.lstrip("\ufeff"))
    if len(lines) < 2:
        return RawTable(headers=[], rows=[])
    delimiter = detect_delimiter(text, sample_lines, PLAIN_TEXT_DELIMITERS)
    return manual_delimited_parse(text, delimiter)
