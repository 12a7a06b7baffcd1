from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.catalog import FieldDefinition
from ..models.raw_table import RawRow
from ..models.row_issue import (
    INVALID_VALUE,
    MISSING_REQUIRED_FIELD,
    ROW_ERROR,
    TRANSFORM_ERROR,
    RowIssue,
)
from ..models.stock_record import StockRecord

"""Row normalization and validation.

Each raw row ends Accepted (a StockRecord) or Rejected (issues only); there
are no retries. A row is accepted when every required field produced a
valid value. Optional fields that fail are dropped from the record and
reported, without rejecting the row.
"""

__all__ = [
    "RowOutcome",
    "lookup_value",
    "is_empty",
    "normalize_row",
    "normalize_rows",
]


@dataclass(frozen=True)
class RowOutcome:
    """Terminal state of one row."""
    row_number: int  # 1-based data row
    record: StockRecord | None
    issues: list[RowIssue] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.record is not None


def lookup_value(row: RawRow, header: str) -> Any:
    """Value under ``header``, falling back to a case-insensitive key match."""
    if header in row:
        return row[header]
    wanted = header.lower()
    for key, value in row.items():
        if key.lower() == wanted:
            return value
    return None


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _convert(value: Any, definition: FieldDefinition) -> tuple[Any, bool]:
    """Run transformers then validators; returns (transformed, valid)."""
    transformed = value
    for transformer in definition.transformers:
        transformed = transformer(transformed)
    valid = all(validator(transformed) for validator in definition.validators)
    return transformed, valid


def normalize_row(
    row: RawRow,
    mapping: dict[str, str],
    definitions: Iterable[FieldDefinition],
    row_number: int,
) -> RowOutcome:
    """Apply the column mapping and field rules to one raw row.

    Every field is checked even after a failure so the warnings list is
    complete for the reviewer.
    """
    issues: list[RowIssue] = []
    values: dict[str, Any] = {}
    required_ok = True

    for definition in definitions:
        name = definition.field
        header = mapping.get(name)
        if header is None:
            if definition.required:
                required_ok = False
                issues.append(RowIssue(
                    row=row_number,
                    field=name,
                    issue_type=MISSING_REQUIRED_FIELD,
                    message=f"Row {row_number}: missing required field '{name}' (no matching column)",
                ))
            continue

        raw = lookup_value(row, header)
        if is_empty(raw):
            if definition.required:
                required_ok = False
                issues.append(RowIssue(
                    row=row_number,
                    field=name,
                    issue_type=MISSING_REQUIRED_FIELD,
                    message=f"Row {row_number}: missing required field '{name}' (column: '{header}')",
                ))
            continue

        try:
            transformed, valid = _convert(raw, definition)
        except (ValueError, TypeError, ArithmeticError) as e:
            if definition.required:
                required_ok = False
            issues.append(RowIssue(
                row=row_number,
                field=name,
                issue_type=TRANSFORM_ERROR,
                message=f"Row {row_number}: error processing '{name}': {e}",
            ))
            continue

        if not valid:
            if definition.required:
                required_ok = False
            issues.append(RowIssue(
                row=row_number,
                field=name,
                issue_type=INVALID_VALUE,
                message=f"Row {row_number}: invalid value for '{name}': '{raw}' (transformed: '{transformed}')",
            ))
            continue

        values[name] = transformed

    if not required_ok or "sku" not in values or "currentStock" not in values:
        if not issues:
            issues.append(RowIssue(
                row=row_number,
                field=None,
                issue_type=ROW_ERROR,
                message=f"Row {row_number}: could not extract required data (SKU and stock)",
            ))
        return RowOutcome(row_number=row_number, record=None, issues=issues)

    return RowOutcome(row_number=row_number, record=StockRecord.from_fields(values), issues=issues)


def normalize_rows(
    rows: Sequence[RawRow],
    mapping: dict[str, str],
    definitions: Sequence[FieldDefinition],
) -> tuple[list[StockRecord], list[RowIssue]]:
    """Fold every row into (accepted records, issues); one bad row never stops the batch."""
    records: list[StockRecord] = []
    issues: list[RowIssue] = []
    for index, row in enumerate(rows, start=1):
        try:
            outcome = normalize_row(row, mapping, definitions, index)
        except Exception as e:
            issues.append(RowIssue(
                row=index,
                field=None,
                issue_type=ROW_ERROR,
                message=f"Row {index}: {e}",
            ))
            continue
        if outcome.record is not None:
            records.append(outcome.record)
        issues.extend(outcome.issues)
    return records, issues
