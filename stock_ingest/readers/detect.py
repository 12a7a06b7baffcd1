from __future__ import annotations

from pathlib import PurePath

import chardet

"""File format and text encoding detection.

Detection never fails: an unrecognised extension yields "unknown", which the
extractor handles with the plain-text fallback. Encoding detection is coarse
on purpose: BOM check, then UTF-8 validity, then a chardet guess for bytes
that are not UTF-8 at all.
"""

__all__ = [
    "EXTENSION_FORMATS",
    "TEXT_FORMATS",
    "UTF8_BOM",
    "detect_format",
    "detect_encoding",
    "decode_text",
]

EXTENSION_FORMATS: dict[str, str] = {
    "xlsx": "excel",
    "xlsm": "excel",
    "xls": "excel",
    "csv": "csv",
    "tsv": "tsv",
    "tab": "tsv",
    "txt": "txt",
    "dat": "txt",
    "json": "json",
    "xml": "xml",
}

TEXT_FORMATS = frozenset({"csv", "tsv", "txt", "json", "xml", "unknown"})

UTF8_BOM = b"\xef\xbb\xbf"

# bytes handed to chardet
_SNIFF_BYTES = 64 * 1024


def detect_format(filename: str) -> str:
    """Classify a file by its (case-insensitive) extension."""
    suffix = PurePath(filename or "").suffix.lower().lstrip(".")
    return EXTENSION_FORMATS.get(suffix, "unknown")


def detect_encoding(buffer: bytes, file_format: str = "unknown") -> str:
    """Return the encoding tag for ``buffer``.

    - spreadsheets are binary containers: "binary"
    - UTF-8 byte-order mark in the first three bytes: "utf-8-bom"
    - valid UTF-8 (including empty input): "utf-8"
    - anything else: chardet's guess, lower-cased ("latin-1" when it has none)
    """
    if file_format not in TEXT_FORMATS:
        return "binary"
    if buffer[:3] == UTF8_BOM:
        return "utf-8-bom"
    try:
        buffer.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass
    guess = chardet.detect(buffer[:_SNIFF_BYTES]).get("encoding")
    return guess.lower() if guess else "latin-1"


def decode_text(buffer: bytes, encoding: str) -> str:
    """Decode ``buffer`` using a tag produced by detect_encoding; any BOM is dropped."""
    if encoding in ("utf-8", "utf-8-bom"):
        text = buffer.decode("utf-8-sig", errors="replace")
    else:
        try:
            text = buffer.decode(encoding, errors="replace")
        except LookupError:
            text = buffer.decode("latin-1")
    return text.lstrip("\ufeff")
