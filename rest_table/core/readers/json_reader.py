"""JSON payload reading backed by JSONPath queries."""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, List, Optional

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath

from ..types import Payload
from .base import ROOT_MARKER

logger = logging.getLogger(__name__)

_INDEFINITE = re.compile(r"\*|\.\.|\[\s*\?|\[[^\]]*[,:][^\]]*\]")


def normalize_jsonpath(path: str) -> str:
    """Prefix `$.` when a path has no root marker."""

    text = path.strip()
    if not text:
        return ROOT_MARKER
    if text.startswith(ROOT_MARKER):
        return text
    return f"{ROOT_MARKER}.{text}"


@lru_cache(maxsize=512)
def _compile(path: str) -> Any:
    return parse_jsonpath(path)


def query(document: Any, path: str) -> Any:
    """Evaluate a JSONPath against a parsed document.

    Returns `None` when nothing matches, the matched value for a definite
    path, and a list of matches for wildcard, filter, slice, or recursive
    paths. A path that is not valid JSONPath also yields `None`.
    """

    expression = normalize_jsonpath(path)
    try:
        compiled = _compile(expression)
    except JSONPathError as exc:
        logger.debug("Invalid JSONPath %r: %s", expression, exc)
        return None
    values = [match.value for match in compiled.find(document)]
    if not values:
        return None
    if len(values) == 1 and not _INDEFINITE.search(expression):
        return values[0]
    return values


def load_json(payload: Payload) -> Any:
    """Parse a JSON payload, returning `None` when it is empty or malformed."""

    if not payload:
        return None
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed JSON response: %s", exc)
        return None


class JsonArrayReader:
    """Extracts the row array from a JSON payload."""

    def read(self, payload: Payload, path: str) -> Optional[List[Any]]:
        document = load_json(payload)
        if document is None:
            return None
        return self.read_document(document, path)

    def read_document(self, document: Any, path: str) -> Optional[List[Any]]:
        found = query(document, path)
        if found is None:
            return None
        if isinstance(found, list):
            return found
        return [found]


class JsonFieldReader:
    """Reads fields from one JSON row object."""

    __slots__ = ("document",)

    def __init__(self, document: Any) -> None:
        self.document = document

    def read(self, index: int, path: str) -> Any:
        if self.document is None:
            return None
        return query(self.document, path)

    def __repr__(self) -> str:
        return f"JsonFieldReader({self.document!r})"
