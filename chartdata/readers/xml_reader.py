from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any

from ..models.file_type import FileType
from ..models.parsed_data import ParsedData
from .errors import ParseError

"""XML reader.

The row element is found automatically: the most frequent child tag of the
document root, looking one level further down when the root only wraps a
single element. Each row element becomes one record:

- attributes -> "<prefix><name>" fields
- leaf children -> trimmed text
- children whose own children all share one tag (more than one of them) ->
  list of records / strings
- other children with children -> nested record

A group holding exactly one repeated child is read as a nested record, not a
one-element list; consumers rely on that shape.
"""

__all__ = [
    "element_to_record",
    "find_row_elements",
    "parse_xml",
]

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    # "{namespace}tag" -> "tag"
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _text(element: ET.Element) -> str:
    return "".join(element.itertext()).strip()


def find_row_elements(root: ET.Element) -> list[ET.Element]:
    """Return the elements of the most frequent child tag under root."""
    groups: dict[str, list[ET.Element]] = {}
    for child in root:
        groups.setdefault(_local_name(child.tag), []).append(child)

    best: list[ET.Element] = []
    for elements in groups.values():
        if len(elements) > len(best):
            best = elements

    if len(best) == 1 and len(root) == 1:
        return find_row_elements(root[0])
    return best


def element_to_record(element: ET.Element, attribute_prefix: str = "@") -> dict[str, Any]:
    record: dict[str, Any] = {}
    for name, value in element.attrib.items():
        record[f"{attribute_prefix}{_local_name(name)}"] = value

    for child in element:
        key = _local_name(child.tag)
        if len(child) > 0:
            tags = {_local_name(c.tag) for c in child}
            if len(tags) == 1 and len(child) > 1:
                record[key] = [
                    element_to_record(c, attribute_prefix) if len(c) > 0 else _text(c)
                    for c in child
                ]
            else:
                record[key] = element_to_record(child, attribute_prefix)
        else:
            record[key] = _text(child)

    if not record:
        return {"value": _text(element)}
    return record


def parse_xml(
    data: bytes,
    file_name: str,
    *,
    row_path: str | None = None,
    attribute_prefix: str = "@",
) -> ParsedData:
    """Parse an XML document into a dataset.

    Args:
        data: raw document bytes (the XML declaration decides the encoding)
        file_name: original file name
        row_path: ElementTree path from the root selecting the row elements;
            auto-detected when omitted
        attribute_prefix: marker prepended to attribute field names

    Raises:
        ParseError: malformed XML, an invalid row_path, or no row elements
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ParseError("Invalid XML format", file_name=file_name, file_type="xml") from e

    if row_path:
        try:
            elements = root.findall(row_path)
        except SyntaxError as e:
            raise ParseError(
                f"XML parsing failed: invalid row path '{row_path}': {e}", file_name=file_name, file_type="xml"
            ) from e
    else:
        elements = find_row_elements(root)

    if not elements:
        raise ParseError("No data rows found in XML", file_name=file_name, file_type="xml")

    rows: list[dict[str, Any]] = []
    headers: dict[str, None] = {}
    for element in elements:
        row = element_to_record(element, attribute_prefix)
        for key in row:
            headers.setdefault(key, None)
        rows.append(row)

    logger.debug(f"{file_name}: row element '{_local_name(elements[0].tag)}' rows={len(rows)}")
    return ParsedData.from_rows(list(headers), rows, file_name, FileType.XML)
