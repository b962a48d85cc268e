"""Shared core type aliases used across readers, parsers, and the enumerator."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .readers.base import Row

RowMapping = Mapping[str, Any]
RowData = Dict[str, Any]
Payload = Optional[str]

Page = Sequence["Row"]
FetchMore = Callable[[], Sequence["Row"]]

NameMappings = Mapping[str, str]
FilterGroups = List[List[Any]]
