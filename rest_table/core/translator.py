"""Translate relational comparison predicates into REST filter criteria.

Each leaf predicate of a normal-form filter group goes through
`translate_predicate`. The result is a tagged outcome rather than an
exception so callers can tell apart the three ways a predicate can fail to
become a criterion:

- `NotConvertible`: the predicate shape cannot be pushed down. The host
  engine evaluates it after rows are fetched.
- `TranslationFailure`: the predicate looked pushable but its literal could
  not be coerced. Also left to the host engine.
- `Unanswerable`: a REQUEST-only field was compared with an operator other
  than `=`. The remote API only echoes the value it was sent, so the query
  can never be answered and must stop (`Unanswerable.unwrap()` raises
  `UnanswerableQueryError`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Sequence

from .context import QueryContext
from .errors import TranslationError, UnanswerableQueryError
from .expressions import ColumnRef, Comparison, Literal, LiteralType
from .fields import Field
from .types import NameMappings

SUPPORTED_OPERATORS = frozenset(
    {
        "=",
        "!=",
        ">",
        "<",
        ">=",
        "<=",
        "LIKE",
        "NOT LIKE",
        "SIMILAR TO",
        "NOT SIMILAR TO",
    }
)

_OPERATOR_ALIASES = {"<>": "!=", "==": "="}

_NUMERIC_TYPES = frozenset(
    {
        LiteralType.TINYINT,
        LiteralType.SMALLINT,
        LiteralType.INTEGER,
        LiteralType.BIGINT,
        LiteralType.DECIMAL,
        LiteralType.FLOAT,
        LiteralType.REAL,
        LiteralType.DOUBLE,
    }
)


@dataclass(frozen=True)
class FilterCriterion:
    """One normalized filter condition ready for request rendering."""

    name: str
    operator: str
    value: Any

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "operator": self.operator, "value": self.value}


@dataclass(frozen=True)
class Translated:
    criterion: FilterCriterion

    def unwrap(self) -> FilterCriterion:
        return self.criterion


@dataclass(frozen=True)
class NotConvertible:
    reason: str

    def unwrap(self) -> None:
        return None


@dataclass(frozen=True)
class TranslationFailure:
    error: TranslationError

    def unwrap(self) -> None:
        return None


@dataclass(frozen=True)
class Unanswerable:
    field_name: str
    operator: str
    message: str

    def unwrap(self) -> None:
        raise UnanswerableQueryError(self.field_name, self.operator, self.message)


TranslationOutcome = Translated | NotConvertible | TranslationFailure | Unanswerable


def normalize_operator(op: str) -> str:
    """Return the canonical operator symbol (`<>` becomes `!=`)."""

    key = " ".join(op.strip().upper().split())
    return _OPERATOR_ALIASES.get(key, key)


def translate_predicate(
    node: Any,
    fields: Sequence[Field],
    context: QueryContext,
    name_mappings: Optional[NameMappings] = None,
) -> TranslationOutcome:
    """Translate one comparison node into a filter criterion.

    Args:
        node: Predicate expression. Only `column <op> literal` is pushable.
        fields: Full field set of the table, in column order.
        context: Per-execution context receiving bound request values.
        name_mappings: Optional field name to remote parameter name table.

    Returns:
        A tagged translation outcome.
    """

    if not isinstance(node, Comparison) or len(node.operands) != 2:
        return NotConvertible("not a two-operand comparison")

    left, right = node.operands
    if not isinstance(left, ColumnRef):
        return NotConvertible("left operand is not a column reference")

    if left.index < 0 or left.index >= len(fields):
        return TranslationFailure(
            TranslationError(f"Column index {left.index} is out of range.")
        )
    field = fields[left.index]
    operator = normalize_operator(node.op)

    if field.is_request_only and operator != "=":
        return Unanswerable(
            field_name=field.name,
            operator=node.op,
            message=_unanswerable_message(field.name, node.op),
        )

    if not isinstance(right, Literal):
        return NotConvertible("right operand is not a literal")
    if operator not in SUPPORTED_OPERATORS:
        return NotConvertible(f"operator {node.op!r} has no REST rendering")

    try:
        value = coerce_literal(right)
    except TranslationError as exc:
        return TranslationFailure(exc)

    if field.is_request:
        context.bind(field, value)

    name = field.name
    if name_mappings:
        name = name_mappings.get(name, name)

    return Translated(FilterCriterion(name=name, operator=operator, value=value))


def coerce_literal(literal: Literal) -> Any:
    """Convert a literal operand to the Python value used in requests.

    Raises:
        TranslationError: Literal type has no rendering, or its value cannot
            be read as the declared type.
    """

    kind = literal.type
    value = literal.value

    if kind is LiteralType.BOOLEAN:
        return value is True or (isinstance(value, str) and value.lower() == "true")
    if kind in (LiteralType.CHAR, LiteralType.VARCHAR):
        return value if isinstance(value, str) else str(value)
    if kind in _NUMERIC_TYPES:
        return _coerce_number(value, kind)
    if kind is LiteralType.DATE:
        return _coerce_date(value)
    if kind in (LiteralType.TIME, LiteralType.TIME_WITH_LOCAL_TIME_ZONE):
        return _coerce_time(value)
    if kind in (LiteralType.TIMESTAMP, LiteralType.TIMESTAMP_WITH_LOCAL_TIME_ZONE):
        return _coerce_timestamp(value)

    raise TranslationError(f"Unexpected literal type: {kind.value}")


def _coerce_number(value: Any, kind: LiteralType) -> int | float | Decimal:
    if isinstance(value, bool):
        raise TranslationError(f"Boolean value {value!r} is not a {kind.value} literal.")
    if isinstance(value, (int, float, Decimal)):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise TranslationError(
            f"Cannot read {value!r} as a {kind.value} literal."
        ) from exc


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return _parse_iso(value, date.fromisoformat, "DATE")


def _coerce_time(value: Any) -> time:
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    return _parse_iso(value, time.fromisoformat, "TIME")


def _coerce_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return _parse_iso(value, datetime.fromisoformat, "TIMESTAMP")


def _parse_iso(value: Any, parser: Any, kind: str) -> Any:
    if not isinstance(value, str):
        raise TranslationError(
            f"Cannot read {type(value).__name__} value {value!r} as a {kind} literal."
        )
    try:
        return parser(value.strip())
    except ValueError as exc:
        raise TranslationError(f"Cannot read {value!r} as a {kind} literal.") from exc


def _unanswerable_message(field_name: str, operator: str) -> str:
    return (
        f"Cannot execute query: Field '{field_name}' is a REQUEST-only parameter "
        "(not returned in REST API response). Only '=' operator is supported for "
        f"REQUEST-only fields. Current query uses '{operator}' operator which "
        "requires actual field values from response for each row. "
        "Possible solutions:\n"
        f"  1) Change query to use '=' operator: WHERE {field_name} = <value>\n"
        f"  2) Mark field '{field_name}' as RESPONSE or BOTH direction in the "
        "table metadata"
    )
