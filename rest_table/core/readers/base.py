"""Reader capabilities shared by every payload format."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Protocol

from ..types import Payload

ROOT_MARKER = "$"


class PayloadFormat(str, Enum):
    """Response formats the adapter can read."""

    JSON = "json"
    XML = "xml"
    CSV = "csv"

    @classmethod
    def from_content_type(cls, content_type: Optional[str]) -> "PayloadFormat":
        """Pick the format for a content type; JSON is the fallback."""

        lowered = (content_type or "").lower()
        if "csv" in lowered:
            return cls.CSV
        if "xml" in lowered:
            return cls.XML
        return cls.JSON


class ArrayReader(Protocol):
    """Extracts the repeated-row array from a raw payload."""

    def read(self, payload: Payload, path: str) -> Optional[List[Any]]: ...


class FieldReader(Protocol):
    """Reads one field from one row of an extracted array."""

    def read(self, index: int, path: str) -> Any: ...


class Row:
    """One element of the remote result set, whatever its source format."""

    __slots__ = ("reader",)

    def __init__(self, reader: FieldReader) -> None:
        self.reader = reader

    def read(self, index: int, path: str) -> Any:
        """Read field `path`; `index` is the row's position within its page."""

        return self.reader.read(index, path)

    def __repr__(self) -> str:
        return f"Row({self.reader!r})"


def strip_root(path: str) -> str:
    """Drop a leading `$` / `$.` root marker from a path."""

    text = path.strip()
    if text.startswith(ROOT_MARKER):
        text = text[len(ROOT_MARKER):]
    return text.lstrip(".")


def split_path(path: str) -> List[str]:
    """Split a dotted path into non-empty segments, ignoring any root marker."""

    return [part for part in strip_root(path).split(".") if part]
