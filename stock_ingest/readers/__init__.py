"""Format-specific readers behind one extract() capability.

The set of readers is closed: the format tag from detect_format selects
exactly one of spreadsheet, delimited text, JSON, XML or the plain-text
fallback.
"""

from __future__ import annotations

from ..models.raw_table import RawTable
from .delimited import read_delimited, read_plain_text
from .detect import decode_text, detect_encoding, detect_format
from .spreadsheet import read_spreadsheet
from .structured import read_json, read_xml
from .table import ExtractionError

__all__ = [
    "ExtractionError",
    "detect_format",
    "detect_encoding",
    "decode_text",
    "extract",
]


def extract(file_format: str, buffer: bytes, encoding: str, *, sample_lines: int = 5) -> RawTable:
    """Turn ``buffer`` into a RawTable using the reader for ``file_format``.

    Raises:
        ExtractionError: the buffer cannot be read as the detected format
    """
    if file_format == "excel":
        return read_spreadsheet(buffer)
    text = decode_text(buffer, encoding)
    if file_format in ("csv", "txt"):
        return read_delimited(text, sample_lines=sample_lines)
    if file_format == "tsv":
        return read_delimited(text, delimiter="\t")
    if file_format == "json":
        return read_json(text)
    if file_format == "xml":
        return read_xml(text)
    return read_plain_text(text, sample_lines=sample_lines)
