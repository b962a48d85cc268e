"""Predicate expression nodes handed to the adapter by the query planner."""

from __future__ import annotations

from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence


class LiteralType(str, Enum):
    """Declared type of a literal operand."""

    BOOLEAN = "BOOLEAN"
    CHAR = "CHAR"
    VARCHAR = "VARCHAR"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    DECIMAL = "DECIMAL"
    FLOAT = "FLOAT"
    REAL = "REAL"
    DOUBLE = "DOUBLE"
    DATE = "DATE"
    TIME = "TIME"
    TIME_WITH_LOCAL_TIME_ZONE = "TIME_WITH_LOCAL_TIME_ZONE"
    TIMESTAMP = "TIMESTAMP"
    TIMESTAMP_WITH_LOCAL_TIME_ZONE = "TIMESTAMP_WITH_LOCAL_TIME_ZONE"
    BINARY = "BINARY"
    INTERVAL = "INTERVAL"
    SYMBOL = "SYMBOL"
    NULL = "NULL"


@dataclass(frozen=True)
class ColumnRef:
    """Reference to a table column by its position in the field set."""

    index: int


@dataclass(frozen=True)
class Literal:
    """Constant operand with its declared type."""

    value: Any
    type: LiteralType


@dataclass(frozen=True)
class Comparison:
    """Operator applied to operands, e.g. `col >= 10`.

    Attributes:
        op: Operator symbol (`=`, `>=`, `LIKE`, `IS NULL`, ...).
        operands: Operand nodes in call order.
    """

    op: str
    operands: tuple["Expression", ...]


@dataclass(frozen=True)
class And:
    """Conjunction of expressions."""

    items: tuple["Expression", ...]


@dataclass(frozen=True)
class Or:
    """Disjunction of expressions."""

    items: tuple["Expression", ...]


@dataclass(frozen=True)
class Not:
    """Negated expression."""

    item: "Expression"


Expression = ColumnRef | Literal | Comparison | And | Or | Not


class E:
    """Fluent expression factory methods."""

    @staticmethod
    def col(index: int) -> ColumnRef:
        return ColumnRef(index)

    @staticmethod
    def lit(value: Any, type: LiteralType | str | None = None) -> Literal:
        """Build a literal, inferring its type from the Python value if omitted."""

        if type is None:
            return Literal(value, _infer_literal_type(value))
        return Literal(value, LiteralType(type))

    @staticmethod
    def cmp(op: str, left: "Expression", right: "Expression") -> Comparison:
        return Comparison(op=op, operands=(left, right))

    @staticmethod
    def eq(left: "Expression", right: "Expression") -> Comparison:
        return E.cmp("=", left, right)

    @staticmethod
    def ne(left: "Expression", right: "Expression") -> Comparison:
        return E.cmp("!=", left, right)

    @staticmethod
    def lt(left: "Expression", right: "Expression") -> Comparison:
        return E.cmp("<", left, right)

    @staticmethod
    def le(left: "Expression", right: "Expression") -> Comparison:
        return E.cmp("<=", left, right)

    @staticmethod
    def gt(left: "Expression", right: "Expression") -> Comparison:
        return E.cmp(">", left, right)

    @staticmethod
    def ge(left: "Expression", right: "Expression") -> Comparison:
        return E.cmp(">=", left, right)

    @staticmethod
    def like(left: "Expression", pattern: "Expression") -> Comparison:
        return E.cmp("LIKE", left, pattern)

    @staticmethod
    def is_null(operand: "Expression") -> Comparison:
        return Comparison(op="IS NULL", operands=(operand,))

    @staticmethod
    def and_(*items: "Expression" | Sequence["Expression"]) -> And:
        return And(items=E._normalize_group_items(items))

    @staticmethod
    def or_(*items: "Expression" | Sequence["Expression"]) -> Or:
        return Or(items=E._normalize_group_items(items))

    @staticmethod
    def not_(item: "Expression") -> Not:
        return Not(item=item)

    @staticmethod
    def _normalize_group_items(
        items: Sequence["Expression" | Sequence["Expression"]],
    ) -> tuple["Expression", ...]:
        if len(items) == 1 and isinstance(items[0], SequenceABC):
            items = tuple(items[0])
        if not items:
            raise ValueError("Grouped expression must contain at least one item.")
        return tuple(items)  # type: ignore[arg-type]


def _infer_literal_type(value: Any) -> LiteralType:
    if value is None:
        return LiteralType.NULL
    if isinstance(value, bool):
        return LiteralType.BOOLEAN
    if isinstance(value, int):
        return LiteralType.BIGINT if abs(value) > 2**31 - 1 else LiteralType.INTEGER
    if isinstance(value, Decimal):
        return LiteralType.DECIMAL
    if isinstance(value, float):
        return LiteralType.DOUBLE
    if isinstance(value, str):
        return LiteralType.VARCHAR
    if isinstance(value, datetime):
        return LiteralType.TIMESTAMP
    if isinstance(value, date):
        return LiteralType.DATE
    if isinstance(value, time):
        return LiteralType.TIME
    if isinstance(value, (bytes, bytearray)):
        return LiteralType.BINARY
    raise TypeError(f"Cannot infer literal type for {type(value).__name__}.")
