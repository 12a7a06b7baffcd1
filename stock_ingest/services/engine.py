from __future__ import annotations

import logging

from ..config.loader import default_catalog
from ..models.catalog import Catalog
from ..models.parse_result import ParseMetadata, ParseResult, Suggestions
from ..models.raw_table import RawTable
from ..models.row_issue import FATAL_EXTRACTION, NO_DATA_ROWS, NO_VALID_ROWS, RowIssue
from ..readers import ExtractionError, detect_encoding, detect_format, extract
from .classifier import build_suggestions, classify_columns, rank_candidates
from .fingerprint import detect_platform
from .normalizer import normalize_rows

"""Stock-report ingestion engine: one file in, one ParseResult out.

Pipeline:
1. Detect format (extension) and encoding (bytes)
2. Extract raw rows with the matching reader
3. Classify columns and fingerprint the platform from the header set
4. Normalize/validate every row, accumulating issues
5. Assemble the result; metadata is filled in as far as the pipeline got

Extraction failures never escape as exceptions: they become a single error
on an unsuccessful result. The engine keeps no state between calls.
"""

__all__ = [
    "NO_DATA_MESSAGE",
    "NO_VALID_ROWS_MESSAGE",
    "StockReportParser",
    "parse_file",
]

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data rows found in file"
NO_VALID_ROWS_MESSAGE = "No valid data rows could be parsed"


class StockReportParser:
    """Parses stock reports against one (read-only) catalog."""

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.catalog = catalog or default_catalog()

    def suggest_columns(self, headers: list[str]) -> dict[str, dict[str, object]]:
        """Ranked header candidates per field, for manual mapping screens."""
        th = self.catalog.thresholds
        return rank_candidates(headers, self.catalog.fields, th.candidate, th.similarity)

    def extract(self, file_bytes: bytes, filename: str) -> tuple[str, str, RawTable]:
        """Detect and extract only; raises ExtractionError for unreadable input."""
        file_format = detect_format(filename)
        encoding = detect_encoding(file_bytes, file_format)
        return file_format, encoding, self._read(file_bytes, file_format, encoding)

    def _read(self, file_bytes: bytes, file_format: str, encoding: str) -> RawTable:
        if not file_bytes:
            return RawTable(headers=[], rows=[])
        return extract(
            file_format,
            file_bytes,
            encoding,
            sample_lines=self.catalog.thresholds.delimiter_sample_lines,
        )

    def parse_file(
        self,
        file_bytes: bytes,
        filename: str,
        *,
        column_overrides: dict[str, str] | None = None,
    ) -> ParseResult:
        file_format = detect_format(filename)
        encoding = detect_encoding(file_bytes, file_format)
        logger.debug(f"file={filename} format={file_format} encoding={encoding}")

        try:
            table = self._read(file_bytes, file_format, encoding)
        except ExtractionError as e:
            logger.warning(f"file={filename} extraction failed: {e}")
            return self._fatal(f"Parsing failed: {e}", file_format, encoding)
        except Exception as e:
            logger.exception(f"file={filename} unexpected extraction error")
            return self._fatal(f"Parsing failed: {e}", file_format, encoding)

        if not table.rows:
            issue = RowIssue(row=-1, field=None, issue_type=NO_DATA_ROWS, message=NO_DATA_MESSAGE)
            return ParseResult(
                success=False,
                data=[],
                errors=[NO_DATA_MESSAGE],
                warnings=[],
                metadata=ParseMetadata(
                    detected_platform=self.catalog.fallback_platform.name,
                    file_format=file_format,
                    encoding=encoding,
                    delimiter=table.delimiter,
                    suggestions=Suggestions(unmapped_columns=list(table.headers)),
                ),
                issues=[issue],
            )

        logger.info(f"file={filename} extracted {len(table.rows)} raw rows")
        th = self.catalog.thresholds
        headers = table.headers
        mapping = classify_columns(
            headers,
            self.catalog.fields,
            th.match,
            th.similarity,
            overrides=column_overrides,
        )
        platform, confidence = detect_platform(headers, self.catalog.platforms)
        suggestions = build_suggestions(headers, mapping, self.catalog.fields, th.suggestion, th.similarity)
        logger.info(f"file={filename} platform={platform} confidence={confidence} columns={mapping}")

        records, issues = normalize_rows(table.rows, mapping, self.catalog.fields)

        total = len(table.rows)
        valid = len(records)
        errors: list[str] = []
        if valid == 0:
            issues.append(RowIssue(row=-1, field=None, issue_type=NO_VALID_ROWS, message=NO_VALID_ROWS_MESSAGE))
            errors.append(NO_VALID_ROWS_MESSAGE)

        logger.info(f"file={filename} parsing complete: {valid} valid, {total - valid} skipped")
        return ParseResult(
            success=valid > 0,
            data=records,
            errors=errors,
            warnings=[i.message for i in issues if not i.file_level],
            metadata=ParseMetadata(
                total_rows=total,
                valid_rows=valid,
                skipped_rows=total - valid,
                detected_platform=platform,
                confidence=confidence,
                file_format=file_format,
                encoding=encoding,
                detected_columns=mapping,
                suggestions=suggestions,
                delimiter=table.delimiter,
            ),
            issues=issues,
        )

    def _fatal(self, message: str, file_format: str, encoding: str) -> ParseResult:
        # nothing was read, so the fallback profile is reported with zero confidence
        return ParseResult(
            success=False,
            data=[],
            errors=[message],
            warnings=[],
            metadata=ParseMetadata(
                detected_platform=self.catalog.fallback_platform.name,
                file_format=file_format,
                encoding=encoding,
            ),
            issues=[RowIssue(row=-1, field=None, issue_type=FATAL_EXTRACTION, message=message)],
        )


def parse_file(
    file_bytes: bytes,
    filename: str,
    *,
    column_overrides: dict[str, str] | None = None,
) -> ParseResult:
    """Parse one stock report with the packaged default catalog."""
    return StockReportParser().parse_file(file_bytes, filename, column_overrides=column_overrides)
