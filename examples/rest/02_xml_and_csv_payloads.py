"""Read the same rows from XML and CSV payloads."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "rest_table").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rest_table.core import Direction, Field, FieldType, ResponseParserChain, RowEnumerator

XML_PAYLOAD = """
<catalog>
  <owner>Acme Books</owner>
  <book><id>1</id><title>Dune</title><tag>sf</tag><tag>classic</tag></book>
  <book><id>2</id><title>Emma</title><tag>romance</tag><price>9.5</price></book>
</catalog>
"""

CSV_PAYLOAD = """id, title, price
1, Dune,
2, Emma, 9.5
"""

FIELDS = [
    Field("id", FieldType.INT, Direction.RESPONSE, "id"),
    Field("title", FieldType.STRING, Direction.RESPONSE, "title"),
    Field("price", FieldType.DECIMAL, Direction.RESPONSE, "price"),
    Field("owner", FieldType.STRING, Direction.RESPONSE, "owner"),
    Field("tag", None, Direction.RESPONSE, "tag"),
]


def main() -> None:
    chain = ResponseParserChain.default()

    print("== XML ==")
    rows = chain.parse(XML_PAYLOAD, "application/xml", "catalog.book")
    for row in RowEnumerator(rows, FIELDS):
        print(row)

    print("== CSV ==")
    rows = chain.parse(CSV_PAYLOAD, "text/csv", "")
    for row in RowEnumerator(rows, FIELDS, projection=[0, 1, 2]):
        print(row)


if __name__ == "__main__":
    main()
