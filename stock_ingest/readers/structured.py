from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any

from ..models.raw_table import RawRow, RawTable
from .table import ExtractionError, normalize_cell

"""JSON and XML readers.

Both produce one RawRow per record object. Nested objects are flattened to
dotted keys ("dimensions.weight"); list values are kept as JSON text.
"""

__all__ = [
    "XML_ROW_PATHS",
    "flatten_record",
    "xml_to_dict",
    "read_json",
    "read_xml",
]

logger = logging.getLogger(__name__)

# Common tabular XML shapes, first hit wins
XML_ROW_PATHS = (
    "root.items.item",
    "root.products.product",
    "root.data.row",
    "root.records.record",
    "items.item",
    "products.product",
    "data.row",
    "records.record",
    "item",
    "product",
    "row",
    "record",
)

TEXT_KEY = "#text"

# ElementTree rejects str input that carries an encoding declaration
_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def flatten_record(obj: dict[str, Any], prefix: str = "") -> RawRow:
    """Flatten nested dicts into one level of dotted keys."""
    out: RawRow = {}
    for key, value in obj.items():
        if key == TEXT_KEY and prefix:
            name = prefix
        else:
            name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            out.update(flatten_record(value, name))
        elif isinstance(value, list):
            out[name] = json.dumps(value, ensure_ascii=False, default=str)
        else:
            out[name] = normalize_cell(value)
    return out


def _to_rows(items: list[Any]) -> RawTable:
    rows = [flatten_record(item if isinstance(item, dict) else {"value": item}) for item in items]
    headers = list(rows[0].keys()) if rows else []
    return RawTable(headers=headers, rows=rows)


def read_json(text: str) -> RawTable:
    """Parse a JSON document: a top-level array of records or a single record."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"JSON parsing failed: {e}") from e

    if isinstance(data, list):
        return _to_rows(data)
    if isinstance(data, dict):
        return _to_rows([data])
    raise ExtractionError("JSON parsing failed: JSON data must be an array or object")


def _local_name(tag: str) -> str:
    # "{namespace}name" -> "name"
    return tag.rsplit("}", 1)[-1]


def xml_to_dict(element: ET.Element) -> Any:
    """Convert an element into plain data.

    Leaf elements without attributes become their stripped text; otherwise a
    dict of attributes and children. Repeated children become lists, an
    attribute sharing a child's name is kept as "@name", and text mixed with
    children or attributes is stored under "#text".
    """
    attrs = {_local_name(k): v for k, v in element.attrib.items()}
    children = list(element)
    text = (element.text or "").strip()
    if not children and not attrs:
        return text

    child_values: dict[str, Any] = {}
    repeated: set[str] = set()
    for child in children:
        name = _local_name(child.tag)
        value = xml_to_dict(child)
        if name not in child_values:
            child_values[name] = value
        elif name in repeated:
            child_values[name].append(value)
        else:
            child_values[name] = [child_values[name], value]
            repeated.add(name)

    out: dict[str, Any] = {}
    for key, value in attrs.items():
        out[f"@{key}" if key in child_values else key] = value
    out.update(child_values)
    if text:
        out[TEXT_KEY] = text
    return out


def _resolve_path(data: Any, path: str) -> Any:
    current = data
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def _find_rows(document: dict[str, Any]) -> tuple[list[Any], str] | None:
    root_content = next(iter(document.values()))
    for base, label in ((document, ""), (root_content, "/")):
        if not isinstance(base, dict):
            continue
        for path in XML_ROW_PATHS:
            found = _resolve_path(base, path)
            if isinstance(found, list) and found:
                return found, label + path
            if isinstance(found, dict):
                return [found], label + path
    return None


def read_xml(text: str) -> RawTable:
    """Parse an XML document into rows.

    The row collection is the first match of XML_ROW_PATHS, looked up first
    from the document (root tag included) and then from inside the root
    element. Without a match the whole document becomes one flattened row.
    """
    try:
        root = ET.fromstring(_DECLARATION.sub("", text, count=1))
    except ET.ParseError as e:
        raise ExtractionError(f"XML parsing failed: {e}") from e

    document = {_local_name(root.tag): xml_to_dict(root)}
    found = _find_rows(document)
    if found is not None:
        items, path = found
        logger.debug(f"xml rows at path={path} count={len(items)}")
        table = _to_rows(items)
        return RawTable(headers=table.headers, rows=table.rows, source=path)

    flat = flatten_record(document)
    if not flat:
        return RawTable(headers=[], rows=[])
    return RawTable(headers=list(flat.keys()), rows=[flat], source="")
