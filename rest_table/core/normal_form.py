"""Group filter expressions into disjunctive and conjunctive normal form.

Both forms are returned as a list of groups of leaf predicates:

- DNF: outer list is OR, each inner list is AND.
- CNF: outer list is AND, each inner list is OR.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .expressions import And, Comparison, Expression, Not, Or
from .types import FilterGroups

NEGATED_OPERATORS = {
    "=": "!=",
    "!=": "=",
    "<>": "=",
    "<": ">=",
    ">=": "<",
    ">": "<=",
    "<=": ">",
    "LIKE": "NOT LIKE",
    "NOT LIKE": "LIKE",
    "SIMILAR TO": "NOT SIMILAR TO",
    "NOT SIMILAR TO": "SIMILAR TO",
}


def conjunction(filters: Iterable[Expression]) -> Optional[Expression]:
    """Combine host filters with `AND`; `None` when there are none."""

    items = tuple(filters)
    if not items:
        return None
    if len(items) == 1:
        return items[0]
    return And(items)


def push_negations(expression: Expression) -> Expression:
    """Move `Not` nodes down to the leaves.

    A negated comparison becomes the comparison with the opposite operator.
    A `Not` over a comparison with no opposite operator stays as a leaf.
    """

    if isinstance(expression, Not):
        inner = expression.item
        if isinstance(inner, Not):
            return push_negations(inner.item)
        if isinstance(inner, And):
            return Or(tuple(push_negations(Not(item)) for item in inner.items))
        if isinstance(inner, Or):
            return And(tuple(push_negations(Not(item)) for item in inner.items))
        if isinstance(inner, Comparison) and inner.op.upper() in NEGATED_OPERATORS:
            return Comparison(NEGATED_OPERATORS[inner.op.upper()], inner.operands)
        return expression
    if isinstance(expression, And):
        return And(tuple(push_negations(item) for item in expression.items))
    if isinstance(expression, Or):
        return Or(tuple(push_negations(item) for item in expression.items))
    return expression


def to_dnf(expression: Optional[Expression]) -> FilterGroups:
    """Return OR-of-AND groups for `expression` (empty for `None`)."""

    if expression is None:
        return []
    return _expand(push_negations(expression), And, Or)


def to_cnf(expression: Optional[Expression]) -> FilterGroups:
    """Return AND-of-OR groups for `expression` (empty for `None`)."""

    if expression is None:
        return []
    return _expand(push_negations(expression), Or, And)


def _expand(expression: Expression, inner: type, outer: type) -> FilterGroups:
    # `outer` children contribute groups side by side; `inner` children are
    # distributed as a cross product.
    if isinstance(expression, outer):
        groups: FilterGroups = []
        for item in expression.items:
            groups.extend(_expand(item, inner, outer))
        return groups
    if isinstance(expression, inner):
        product: List[List[Expression]] = [[]]
        for item in expression.items:
            product = [
                left + right for left in product for right in _expand(item, inner, outer)
            ]
        return product
    return [[expression]]
