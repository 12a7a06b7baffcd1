from __future__ import annotations

import io
import logging
from typing import Any

import pandas as pd

from ..models.raw_table import RawTable
from .table import ExtractionError, normalize_cell, rows_from_matrix

"""Spreadsheet reader (xlsx / xlsm via openpyxl, xls via pandas' engine selection).

Every sheet is read raw (no header inference) and the first non-empty row is
applied as header. The sheet yielding the most data rows wins; ties keep the
first sheet in workbook order.
"""

__all__ = [
    "read_workbook",
    "read_spreadsheet",
]

logger = logging.getLogger(__name__)


def read_workbook(buffer: bytes) -> dict[str, pd.DataFrame]:
    """Read every sheet of an in-memory workbook, returning raw DataFrames keyed by sheet name.

    Raises:
        ExtractionError: the buffer is not a readable workbook
    """
    dfs: dict[str, pd.DataFrame] = {}
    try:
        xls = pd.ExcelFile(io.BytesIO(buffer))
        for name in xls.sheet_names:
            # Raw read, header applied by rows_from_matrix
            dfs[str(name)] = xls.parse(name, header=None)
    except Exception as e:
        raise ExtractionError(f"Excel parsing failed: {e}") from e
    return dfs


def _sheet_matrix(df: pd.DataFrame) -> list[list[Any]]:
    matrix = []
    for raw in df.values.tolist():
        cells = [normalize_cell(v) for v in raw]
        if any(str(c).strip() != "" for c in cells):
            matrix.append(cells)
    return matrix


def read_spreadsheet(buffer: bytes) -> RawTable:
    """Extract rows from the sheet with the most data rows."""
    best: RawTable | None = None
    for sheet_name, df in read_workbook(buffer).items():
        headers, rows = rows_from_matrix(_sheet_matrix(df))
        logger.debug(f"sheet={sheet_name} rows={len(rows)}")
        if best is None or len(rows) > len(best.rows):
            best = RawTable(headers=headers, rows=rows, source=sheet_name)
    if best is None:
        return RawTable(headers=[], rows=[])
    return best
