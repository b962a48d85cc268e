"""Show how predicates become filter criteria, and when a query is refused."""

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

from rest_table import E, Field, FieldType, QueryContext, UnanswerableQueryError
from rest_table.core import Direction, to_cnf, to_dnf, translate_predicate

FIELDS = [
    Field("id", FieldType.INT, Direction.RESPONSE, "id"),
    Field("region", FieldType.STRING, Direction.REQUEST),
    Field("status", FieldType.STRING, Direction.BOTH, "status"),
]


def main() -> None:
    context = QueryContext()
    where = E.and_(
        E.eq(E.col(1), E.lit("eu")),
        E.or_(E.ge(E.col(0), E.lit(100)), E.not_(E.eq(E.col(2), E.lit("closed")))),
    )

    print("DNF groups:")
    for group in to_dnf(where):
        print("  ", [translate_predicate(node, FIELDS, context) for node in group])
    print("CNF groups:")
    for group in to_cnf(where):
        print("  ", [translate_predicate(node, FIELDS, context) for node in group])
    print("Bound request values:", context.bound_values)

    # REQUEST-only fields can only be compared with `=`.
    outcome = translate_predicate(E.gt(E.col(1), E.lit("eu")), FIELDS, QueryContext())
    try:
        outcome.unwrap()
    except UnanswerableQueryError as exc:
        print("Refused:", exc)


if __name__ == "__main__":
    main()
