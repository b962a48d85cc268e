"""CSV payload reading: header line plus one row per record."""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..types import Payload, RowData
from .base import strip_root

logger = logging.getLogger(__name__)


class CsvArrayReader:
    """Reads a CSV payload into ordered `name -> value` rows.

    The first record is the header. Header names and values are trimmed; a
    record shorter than the header leaves the missing trailing fields `None`.
    The path argument is ignored since CSV has a single row set.
    """

    def read(self, payload: Payload, path: str = "") -> List[RowData]:
        rows: List[RowData] = []
        if not payload:
            return rows
        try:
            records = csv.reader(io.StringIO(payload), strict=True)
            header = next(records, None)
            if header is None:
                return rows
            columns = [name.strip() for name in header]
            for record in records:
                if not record:
                    continue
                rows.append(
                    {
                        column: record[i].strip() if i < len(record) else None
                        for i, column in enumerate(columns)
                    }
                )
        except csv.Error as exc:
            logger.warning("Malformed CSV response: %s", exc)
            return []
        return rows


class CsvFieldReader:
    """Reads a column from a page of CSV rows by row index.

    A leading `$.` on the column path is ignored.
    """

    __slots__ = ("rows",)

    def __init__(self, rows: Sequence[Dict[str, Any]]) -> None:
        self.rows = rows

    def read(self, index: int, path: str) -> Optional[Any]:
        if index < 0 or index >= len(self.rows):
            return None
        return self.rows[index].get(strip_root(path))

    def __repr__(self) -> str:
        return f"CsvFieldReader(rows={len(self.rows)})"
