from __future__ import annotations
from stock_ingest.models.row_issue import (
    INVALID_VALUE,
    MISSING_REQUIRED_FIELD,
    TRANSFORM_ERROR,
)
from stock_ingest.models.stock_record import StockRecord
from stock_ingest.services.normalizer import is_empty, lookup_value, normalize_row, normalize_rows

MAPPING = {"sku": "SKU", "currentStock": "Qty"}


def test_lookup_value_case_insensitive_fallback():
    row = {"sku": "a", "QTY": 1}
    assert lookup_value(row, "sku") == "a"
    assert lookup_value(row, "Qty") == 1
    assert lookup_value(row, "missing") is None


def test_is_empty():
    assert is_empty(None)
    assert is_empty("   ")
    assert not is_empty(0)
    assert not is_empty("0")


def test_normalize_row_accepts(fields):
    outcome = normalize_row({"SKU": " abc ", "Qty": "12.9"}, MAPPING, fields, 1)
    assert outcome.accepted
    assert outcome.record == StockRecord(sku="ABC", current_stock=12)
    assert outcome.issues == []


def test_normalize_row_with_optional_fields(fields):
    mapping = {**MAPPING, "name": "Name", "price": "Price", "category": "Cat"}
    row = {"SKU": "a", "Qty": 3, "Name": " Widget ", "Price": "$9.99", "Cat": "Tools"}
    outcome = normalize_row(row, mapping, fields, 1)
    assert outcome.record == StockRecord("A", 3, "Widget", 9.99, "Tools")


def test_negative_stock_is_invalid(fields):
    outcome = normalize_row({"SKU": "A", "Qty": "-5"}, MAPPING, fields, 1)
    assert not outcome.accepted
    assert [i.issue_type for i in outcome.issues] == [INVALID_VALUE]
    assert outcome.issues[0].message == "Row 1: invalid value for 'currentStock': '-5' (transformed: '-5')"


def test_non_numeric_stock_is_transform_error(fields):
    outcome = normalize_row({"SKU": "A", "Qty": "lots"}, MAPPING, fields, 2)
    assert not outcome.accepted
    issue = outcome.issues[0]
    assert issue.issue_type == TRANSFORM_ERROR
    assert issue.field == "currentStock"
    assert issue.message.startswith("Row 2: error processing 'currentStock':")


def test_unmapped_required_field(fields):
    outcome = normalize_row({"SKU": "A"}, {"sku": "SKU"}, fields, 1)
    assert not outcome.accepted
    assert outcome.issues[0].issue_type == MISSING_REQUIRED_FIELD
    assert outcome.issues[0].message == "Row 1: missing required field 'currentStock' (no matching column)"


def test_blank_required_value(fields):
    outcome = normalize_row({"SKU": "   ", "Qty": "4"}, MAPPING, fields, 3)
    assert not outcome.accepted
    assert outcome.issues[0].message == "Row 3: missing required field 'sku' (column: 'SKU')"


def test_every_field_is_reported(fields):
    outcome = normalize_row({"SKU": "", "Qty": "-1"}, MAPPING, fields, 1)
    assert [i.field for i in outcome.issues] == ["sku", "currentStock"]


def test_bad_optional_field_keeps_row(fields):
    mapping = {**MAPPING, "price": "Price"}
    outcome = normalize_row({"SKU": "A", "Qty": "1", "Price": "free"}, mapping, fields, 1)
    assert outcome.accepted
    assert outcome.record.price is None
    assert outcome.issues[0].issue_type == TRANSFORM_ERROR
    assert outcome.issues[0].field == "price"


def test_blank_optional_field_is_silent(fields):
    mapping = {**MAPPING, "name": "Name"}
    outcome = normalize_row({"SKU": "A", "Qty": "1", "Name": ""}, mapping, fields, 1)
    assert outcome.accepted and outcome.issues == []
    assert outcome.record.name is None


def test_normalize_rows_counts(fields):
    rows = [
        {"SKU": "A", "Qty": "1"},
        {"SKU": "B", "Qty": "-1"},
        {"SKU": "C", "Qty": "2"},
    ]
    records, issues = normalize_rows(rows, MAPPING, fields)
    assert [r.sku for r in records] == ["A", "C"]
    assert [i.row for i in issues] == [2]
