"""Format-specific array and field readers."""

from __future__ import annotations

from .base import ArrayReader, FieldReader, PayloadFormat, Row, split_path, strip_root
from .csv_reader import CsvArrayReader, CsvFieldReader
from .json_reader import JsonArrayReader, JsonFieldReader
from .xml_reader import XmlArrayReader, XmlFieldReader

__all__ = [
    "ArrayReader",
    "CsvArrayReader",
    "CsvFieldReader",
    "FieldReader",
    "JsonArrayReader",
    "JsonFieldReader",
    "PayloadFormat",
    "Row",
    "XmlArrayReader",
    "XmlFieldReader",
    "split_path",
    "strip_root",
]
