"""Forward-only cursor over a paginated remote result set."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .context import QueryContext
from .converters import convert_value
from .fields import Field, project_fields
from .readers.base import Row
from .types import FetchMore


class EnumeratorState(str, Enum):
    FRESH = "fresh"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


def _no_more_rows() -> Sequence[Row]:
    return []


class RowEnumerator:
    """Single-pass cursor producing one tuple per remote row.

    The enumerator starts on an initial page and asks `fetch_more` for the
    next page whenever the current one is consumed. An empty page ends the
    enumeration for good.

    Args:
        rows: First page of rows.
        fields: Full field set of the table, in declared order.
        projection: Original field indices to output, in output order.
            `None` outputs every field.
        fetch_more: Zero-argument callable returning the next page; an empty
            sequence means no further data.
        context: Execution context holding bound request values, read for
            REQUEST-only fields.
    """

    def __init__(
        self,
        rows: Sequence[Row],
        fields: Sequence[Field],
        projection: Optional[Sequence[int]] = None,
        fetch_more: Optional[FetchMore] = None,
        context: Optional[QueryContext] = None,
    ) -> None:
        self._page: List[Row] = list(rows)
        self._fields = project_fields(fields, projection)
        self._fetch_more = fetch_more or _no_more_rows
        self._context = context or QueryContext()
        self._index = -1
        self._current: Optional[Row] = None
        self._state = EnumeratorState.FRESH
        self._closed = False

    @property
    def state(self) -> EnumeratorState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def fields(self) -> List[Field]:
        """Projected fields, one per output slot."""

        return list(self._fields)

    def advance(self) -> bool:
        """Move to the next row, fetching a new page when needed.

        Returns:
            `True` when positioned on a row, `False` once the result set is
            exhausted or the enumerator has been released.
        """

        if self._closed or self._state is EnumeratorState.EXHAUSTED:
            return False

        if self._index + 1 < len(self._page):
            self._index += 1
        else:
            page = list(self._fetch_more())
            if not page:
                self._exhaust()
                return False
            self._page = page
            self._index = 0

        self._current = self._page[self._index]
        self._state = EnumeratorState.POSITIONED
        return True

    def current_row(self) -> Tuple[Any, ...]:
        """Return the projected, typed values of the current row.

        Raises:
            RuntimeError: The cursor is not positioned on a row.
        """

        row = self._current
        if self._state is not EnumeratorState.POSITIONED or row is None:
            raise RuntimeError(f"No current row (enumerator is {self._state.value}).")
        return tuple(self._value(field, row) for field in self._fields)

    def restart(self) -> None:
        """Forget the current row.

        Pages already consumed are not replayed.
        """

        self._current = None

    def release(self) -> None:
        """Mark the enumerator closed. The page source is not closed here."""

        self._closed = True

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        while self.advance():
            yield self.current_row()

    def _value(self, field: Field, row: Row) -> Any:
        if field.is_request_only:
            raw = self._context.bound_value(field.name)
        else:
            raw = row.read(self._index, field.path or field.name)
        return convert_value(raw, field.type)

    def _exhaust(self) -> None:
        self._state = EnumeratorState.EXHAUSTED
        self._current = None
        self._page = []
        self._index = -1
