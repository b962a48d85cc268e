"""Turn raw HTTP response payloads into pages of rows.

Parsers are selected by content type through `ResponseParserChain`; the JSON
parser accepts every content type and is consulted last.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .errors import ResponseParseError
from .readers.base import PayloadFormat, Row, split_path
from .readers.csv_reader import CsvArrayReader, CsvFieldReader
from .readers.json_reader import JsonArrayReader, JsonFieldReader, load_json
from .readers.xml_reader import XmlArrayReader, XmlFieldReader, element_to_row, parse_xml
from .types import Payload, RowData

ITEM_VALUE_KEY = "item_value"


class ResponseParser(Protocol):
    """Parses one payload format into rows."""

    name: str
    priority: int

    def can_handle(self, content_type: Optional[str]) -> bool: ...

    def parse(self, payload: Payload, array_path: str) -> List[Row]: ...


def root_fields(document: Any, parts: Sequence[str]) -> RowData:
    """Top-level scalar and object values that are not on the array path."""

    if not isinstance(document, Mapping):
        return {}
    return {
        key: value
        for key, value in document.items()
        if key not in parts and not isinstance(value, list)
    }


def merge_root_fields(item: Any, fields: Mapping[str, Any]) -> RowData:
    """Row data with root fields first, overridden by the item's own fields."""

    merged: RowData = dict(fields)
    if isinstance(item, Mapping):
        merged.update(item)
    else:
        merged[ITEM_VALUE_KEY] = item
    return merged


class CsvResponseParser:
    name = "csv"
    priority = 10

    def __init__(self) -> None:
        self._reader = CsvArrayReader()

    def can_handle(self, content_type: Optional[str]) -> bool:
        return PayloadFormat.from_content_type(content_type) is PayloadFormat.CSV

    def parse(self, payload: Payload, array_path: str) -> List[Row]:
        rows = self._reader.read(payload, array_path)
        field_reader = CsvFieldReader(rows)
        return [Row(field_reader) for _ in rows]


class XmlResponseParser:
    """Rows from an XML payload, with root-level scalars merged into each row."""

    name = "xml"
    priority = 20

    def __init__(self) -> None:
        self._reader = XmlArrayReader()

    def can_handle(self, content_type: Optional[str]) -> bool:
        return PayloadFormat.from_content_type(content_type) is PayloadFormat.XML

    def parse(self, payload: Payload, array_path: str) -> List[Row]:
        root = parse_xml(payload)
        if root is None:
            return []
        parts = split_path(array_path)
        shared = root_fields(element_to_row(root), parts)
        return [
            Row(XmlFieldReader(merge_root_fields(element_to_row(node), shared)))
            for node in self._reader.select(root, array_path)
        ]


class JsonResponseParser:
    """Rows from a JSON payload.

    A single-segment path (``$.items``) yields one row per array element. A
    nested path (``$.departments.employees``) is flattened into one row per
    innermost element; each level's non-array fields are kept under that
    level's name, so an employee row reads ``departments.name`` and
    ``employees.name``.
    """

    name = "json"
    priority = 100

    def __init__(self) -> None:
        self._reader = JsonArrayReader()

    def can_handle(self, content_type: Optional[str]) -> bool:
        return True

    def parse(self, payload: Payload, array_path: str) -> List[Row]:
        document = load_json(payload)
        if document is None:
            return []

        parts = split_path(array_path)
        shared = root_fields(document, parts)
        if len(parts) > 1:
            flattened: List[RowData] = []
            _flatten(document, parts, 0, {}, flattened)
            return [
                Row(JsonFieldReader(merge_root_fields(item, shared))) for item in flattened
            ]

        items = self._reader.read_document(document, array_path) or []
        return [Row(JsonFieldReader(merge_root_fields(item, shared))) for item in items]


def _flatten(
    container: Any,
    parts: Sequence[str],
    level: int,
    accumulated: Dict[str, Any],
    out: List[RowData],
) -> None:
    if not isinstance(container, Mapping):
        return
    name = parts[level]
    value = container.get(name)
    if value is None:
        return
    # An object on the path behaves as a one-element array.
    elements = value if isinstance(value, list) else [value]
    for element in elements:
        if not isinstance(element, Mapping):
            continue
        level_data = {k: v for k, v in element.items() if not isinstance(v, list)}
        current = {**accumulated, name: level_data}
        if level == len(parts) - 1:
            out.append(current)
        else:
            _flatten(element, parts, level + 1, current, out)


class ResponseParserChain:
    """Ordered set of parsers; the first one accepting a content type wins."""

    def __init__(self, parsers: Sequence[ResponseParser] = ()) -> None:
        self._parsers: List[ResponseParser] = []
        for parser in parsers:
            self.add(parser)

    @classmethod
    def default(cls) -> "ResponseParserChain":
        return cls([CsvResponseParser(), XmlResponseParser(), JsonResponseParser()])

    def add(self, parser: ResponseParser) -> "ResponseParserChain":
        self._parsers.append(parser)
        self._parsers.sort(key=lambda item: item.priority)
        return self

    @property
    def parsers(self) -> List[ResponseParser]:
        return list(self._parsers)

    def parser_for(self, content_type: Optional[str]) -> Optional[ResponseParser]:
        for parser in self._parsers:
            if parser.can_handle(content_type):
                return parser
        return None

    def parse(
        self, payload: Payload, content_type: Optional[str], array_path: str
    ) -> List[Row]:
        parser = self.parser_for(content_type)
        if parser is None:
            raise ResponseParseError(f"No parser found for content type: {content_type}")
        return parser.parse(payload, array_path)
