from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from ..models.raw_table import RawRow

"""Helpers shared by the readers: header naming, cell normalization, row building."""

__all__ = [
    "ExtractionError",
    "normalize_cell",
    "make_headers",
    "row_has_data",
    "rows_from_matrix",
]


class ExtractionError(Exception):
    """Raised when a byte buffer cannot be turned into rows at all."""


def normalize_cell(value: Any) -> Any:
    """Convert a raw cell into str/int/float, "" for missing.

    Integral floats become ints so identifiers stored as numbers in a
    spreadsheet ("12345" -> 12345.0) come back without a trailing ".0".
    """
    if isinstance(value, np.generic):
        value = value.item()
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def make_headers(cells: list[Any]) -> list[str]:
    """Trim header cells; blanks become Column_<n>, repeats get a _<k> suffix."""
    headers: list[str] = []
    for index, cell in enumerate(cells, start=1):
        value = normalize_cell(cell)
        name = str(value).strip() if value != "" else ""
        if not name:
            name = f"Column_{index}"
        base = name
        suffix = 2
        while name in headers:
            name = f"{base}_{suffix}"
            suffix += 1
        headers.append(name)
    return headers


def row_has_data(row: RawRow) -> bool:
    return any(str(v).strip() != "" for v in row.values())


def rows_from_matrix(matrix: list[list[Any]]) -> tuple[list[str], list[RawRow]]:
    """Use the first row as header row and map the remaining rows onto it.

    Missing cells default to "", extra cells beyond the header are ignored
    and rows whose values are all empty are dropped.
    """
    if not matrix:
        return [], []
    headers = make_headers(matrix[0])
    rows: list[RawRow] = []
    for raw in matrix[1:]:
        row: RawRow = {}
        for idx, header in enumerate(headers):
            row[header] = normalize_cell(raw[idx]) if idx < len(raw) else ""
        if row_has_data(row):
            rows.append(row)
    return headers, rows
