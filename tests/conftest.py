# Shared pytest fixtures
from __future__ import annotations
import io
import logging
from pathlib import Path

import pandas as pd
import pytest

from stock_ingest.config.loader import CATALOG_ENV_VAR, default_catalog
from stock_ingest.logging.init import APP_LOGGER_NAME, reset_logging
from stock_ingest.services.engine import StockReportParser


@pytest.fixture(autouse=True)
def clean_logging(monkeypatch):
    # Handlers bound to a previous test's captured stdout must not leak
    reset_logging()
    logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "data").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def catalog():
    return default_catalog()


@pytest.fixture()
def fields(catalog):
    return catalog.fields


@pytest.fixture()
def parser(catalog) -> StockReportParser:
    return StockReportParser(catalog)


@pytest.fixture()
def make_xlsx():
    """Build an in-memory workbook from {sheet name: list of rows (first row = header)}."""
    def _make(sheets: dict[str, list[list[object]]]) -> bytes:
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            for name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=name, index=False, header=False)
        return buf.getvalue()
    return _make


@pytest.fixture()
def sample_catalog_yaml() -> str:
    return """thresholds:
  match: 0.3
fields:
  - field: sku
    required: true
    patterns: [ref]
    transformers: [trim_upper]
    validators: [non_empty_string]
  - field: currentStock
    required: true
    patterns: [level]
    transformers: [to_int_floor]
    validators: [non_negative_number]
platforms:
  - name: warehouse
    indicators: [ref, bin]
    ceiling: 0.9
  - name: generic
    indicators: [level]
    ceiling: 0.5
    fallback: true
"""


@pytest.fixture()
def write_catalog(temp_workdir: Path, sample_catalog_yaml: str) -> Path:
    path = temp_workdir / "catalog.yml"
    path.write_text(sample_catalog_yaml, encoding="utf-8")
    return path
