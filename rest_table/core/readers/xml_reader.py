"""XML payload reading over a parsed element tree.

Path resolution walks element children by tag. Intermediate segments only
descend into the first matching child; the final segment keeps every match
as a row. Each target element becomes a row mapping where children are
grouped by tag in first-seen order: a tag seen once maps to a leaf value or a
nested mapping, a repeated tag maps to a list in document order.

Example, for path ``catalog.item``::

    <catalog>
      <item><id>1</id><tag>a</tag><tag>b</tag></item>
      <item><id>2</id><dim><w>3.5</w></dim></item>
    </catalog>

yields ``[{"id": 1, "tag": ["a", "b"]}, {"id": 2, "dim": {"w": 3.5}}]``.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

from ..types import Payload, RowData
from .base import split_path, strip_root

logger = logging.getLogger(__name__)

_INT64 = (-(2**63), 2**63 - 1)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?[fFdD]?"
    r"|[+-]?(NaN|Infinity)"
)


def local_name(tag: Any) -> str:
    """Tag name without its `{namespace}` prefix."""

    text = str(tag)
    if text.startswith("{"):
        return text.split("}", 1)[1]
    return text


def child_elements(element: ET.Element) -> List[ET.Element]:
    # Comments and processing instructions have non-string tags.
    return [child for child in element if isinstance(child.tag, str)]


def coerce_leaf(text: str) -> int | float | str:
    """Read leaf text as an integer, then a float, else keep the string.

    Integers within the 64-bit range stay `int`; wider digit strings fall
    through to `float`.
    """

    if _INTEGER.fullmatch(text):
        number = int(text)
        if _INT64[0] <= number <= _INT64[1]:
            return number
        return float(number)
    if _FLOAT.fullmatch(text):
        return float(text.rstrip("fFdD"))
    return text


def element_to_row(element: ET.Element) -> RowData:
    """Convert an element into a row mapping grouped by child tag."""

    groups: Dict[str, List[ET.Element]] = {}
    for child in child_elements(element):
        groups.setdefault(local_name(child.tag), []).append(child)

    row: RowData = {}
    for tag, nodes in groups.items():
        if len(nodes) == 1:
            row[tag] = _element_value(nodes[0])
        else:
            row[tag] = [_element_value(node) for node in nodes]
    return row


def _element_value(element: ET.Element) -> Any:
    if child_elements(element):
        return element_to_row(element)
    return coerce_leaf("".join(element.itertext()).strip())


def parse_xml(payload: Payload) -> Optional[ET.Element]:
    """Parse a payload into its root element, or `None` when malformed."""

    if not payload:
        return None
    try:
        return ET.fromstring(payload)
    except ET.ParseError as exc:
        logger.warning("Malformed XML response: %s", exc)
        return None


class XmlArrayReader:
    """Extracts rows from an XML payload by dotted element path."""

    def read(self, payload: Payload, path: str) -> Optional[List[RowData]]:
        root = parse_xml(payload)
        if root is None:
            return None
        return [element_to_row(node) for node in self.select(root, path)]

    def select(self, root: ET.Element, path: str) -> List[ET.Element]:
        """Resolve `path` to the list of target elements."""

        parts = split_path(path)
        if parts and parts[0] == local_name(root.tag):
            parts = parts[1:]

        if not parts:
            return child_elements(root)

        current = root
        for position, part in enumerate(parts):
            matches = [
                child for child in child_elements(current) if local_name(child.tag) == part
            ]
            if not matches:
                return []
            if position == len(parts) - 1:
                return matches
            # Only the first intermediate match is followed.
            current = matches[0]
        return []


class XmlFieldReader:
    """Reads dotted keys from one converted XML row."""

    __slots__ = ("row",)

    def __init__(self, row: Any) -> None:
        self.row = row

    def read(self, index: int, path: str) -> Any:
        current = self.row
        for part in strip_root(path).split("."):
            if not part:
                continue
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        return current

    def __repr__(self) -> str:
        return f"XmlFieldReader({self.row!r})"
