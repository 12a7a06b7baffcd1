from __future__ import annotations
import json
from pathlib import Path
from stock_ingest import parse_file
from stock_ingest.logging.error_log import DiagnosticLogBuffer

KEYS = {"timestamp", "file", "row", "field", "issue_type", "message"}
ISSUE_TYPES = {
    "FATAL_EXTRACTION",
    "NO_DATA_ROWS",
    "NO_VALID_ROWS",
    "MISSING_REQUIRED_FIELD",
    "INVALID_VALUE",
    "TRANSFORM_ERROR",
    "ROW_ERROR",
}


def test_diagnostic_lines(temp_workdir: Path):
    buf = DiagnosticLogBuffer(temp_workdir / "logs")
    for payload, name in [
        (b"SKU,Quantity\nA,-1\nB,x\n,3\n", "rows.csv"),
        (b"", "empty.csv"),
        (b"{x", "broken.json"),
    ]:
        buf.add_result(name, parse_file(payload, name))
    lines = [json.loads(raw) for raw in buf.flush().read_text(encoding="utf-8").splitlines()]
    assert len(lines) == 6
    for obj in lines:
        assert set(obj) == KEYS
        assert obj["issue_type"] in ISSUE_TYPES
        assert obj["timestamp"].endswith("Z")
        if obj["row"] == -1:
            assert obj["field"] is None
        else:
            assert obj["row"] >= 1
            assert obj["message"].startswith(f"Row {obj['row']}:")
