"""Typed conversion of extracted response values."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from .fields import FieldType

logger = logging.getLogger(__name__)

_INT_BOUNDS = {
    FieldType.BYTE: (-(2**7), 2**7 - 1),
    FieldType.SHORT: (-(2**15), 2**15 - 1),
    FieldType.INT: (-(2**31), 2**31 - 1),
    FieldType.LONG: (-(2**63), 2**63 - 1),
}


def text_of(value: Any) -> str:
    """Textual form of a value as it would appear in a response."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Mapping, list)):
        return json.dumps(value, default=text_of)
    return str(value)


def convert_value(value: Any, field_type: Optional[FieldType]) -> Any:
    """Convert a raw response or bound value to the column's Python type.

    Empty text for a non-string column reads as `None`, as does any value
    that cannot be parsed as the declared type.
    """

    if value is None:
        return None
    if field_type is None:
        return text_of(value)
    if field_type is not FieldType.STRING and text_of(value) == "":
        return None

    try:
        return _convert(value, field_type)
    except (ValueError, ArithmeticError, TypeError) as exc:
        logger.warning(
            "Cannot convert %r to %s: %s", value, field_type.value, exc
        )
        return None


def _convert(value: Any, field_type: FieldType) -> Any:
    if field_type is FieldType.BOOLEAN:
        if isinstance(value, bool):
            return value
        return text_of(value).strip().lower() == "true"

    if field_type.is_integral:
        return _to_int(value, field_type)

    if field_type in (FieldType.FLOAT, FieldType.DOUBLE):
        if isinstance(value, bool):
            raise ValueError("boolean is not a number")
        return float(value) if isinstance(value, (int, float, Decimal)) else float(
            text_of(value).strip()
        )

    if field_type is FieldType.DECIMAL:
        if isinstance(value, float):
            return Decimal(repr(value))
        try:
            return Decimal(text_of(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"invalid decimal literal {value!r}") from exc

    if field_type is FieldType.DATE:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(text_of(value).strip()[:10])

    if field_type is FieldType.TIME:
        if isinstance(value, datetime):
            return value.time()
        if isinstance(value, time):
            return value
        return time.fromisoformat(_iso_text(value))

    if field_type is FieldType.TIMESTAMP:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        return datetime.fromisoformat(_iso_text(value))

    if field_type is FieldType.UUID:
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(text_of(value).strip())

    if field_type is FieldType.CHAR:
        text = text_of(value)
        return text[0] if text else None

    return text_of(value)


def _to_int(value: Any, field_type: FieldType) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, (float, Decimal)):
        if value != int(value):
            raise ValueError(f"{value!r} has a fractional part")
        number = int(value)
    else:
        text = text_of(value).strip()
        if not text.lstrip("+-").isdigit():
            raise ValueError(f"invalid integer literal {text!r}")
        number = int(text)

    low, high = _INT_BOUNDS[field_type]
    if not low <= number <= high:
        raise ValueError(f"{number} is out of range for {field_type.value}")
    return number


def _iso_text(value: Any) -> str:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    text = text_of(value).strip()
    if text[-1:] in ("Z", "z"):
        return text[:-1] + "+00:00"
    return text
