"""Column metadata for REST-backed tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .config import TableConfig


class FieldType(str, Enum):
    """Scalar column types supported by value conversion."""

    STRING = "string"
    BOOLEAN = "boolean"
    BYTE = "byte"
    CHAR = "char"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    UUID = "uuid"

    @classmethod
    def of(cls, name: str | None) -> Optional["FieldType"]:
        """Resolve a schema type name, returning `None` when it is unknown."""

        if name is None:
            return None
        key = name.strip().lower()
        if key in cls._value2member_map_:
            return cls(key)
        return _TYPE_ALIASES.get(key)

    @property
    def is_integral(self) -> bool:
        return self in _INTEGRAL_TYPES


_TYPE_ALIASES = {
    "str": FieldType.STRING,
    "text": FieldType.STRING,
    "varchar": FieldType.STRING,
    "bool": FieldType.BOOLEAN,
    "tinyint": FieldType.BYTE,
    "smallint": FieldType.SHORT,
    "integer": FieldType.INT,
    "bigint": FieldType.LONG,
    "real": FieldType.FLOAT,
    "number": FieldType.DOUBLE,
    "numeric": FieldType.DECIMAL,
    "datetime": FieldType.TIMESTAMP,
    "date-time": FieldType.TIMESTAMP,
}

_INTEGRAL_TYPES = frozenset(
    {FieldType.BYTE, FieldType.SHORT, FieldType.INT, FieldType.LONG}
)


class Direction(str, Enum):
    """Where a field's value can appear: request, response, or both."""

    REQUEST = "request"
    RESPONSE = "response"
    BOTH = "both"

    @property
    def is_request(self) -> bool:
        return self in (Direction.REQUEST, Direction.BOTH)

    @property
    def is_response(self) -> bool:
        return self in (Direction.RESPONSE, Direction.BOTH)

    @classmethod
    def of(cls, value: "str | Direction") -> "Direction":
        if isinstance(value, Direction):
            return value
        key = value.strip().lower()
        if key not in cls._value2member_map_:
            allowed = sorted(cls._value2member_map_)
            raise ValueError(f"Unsupported direction: {value}. Supported: {allowed}")
        return cls(key)


@dataclass(frozen=True)
class Field:
    """Static metadata for one table column.

    Attributes:
        name: Column name, unique within a table.
        type: Declared scalar type, `None` when the schema type is unknown.
        direction: Whether the value is sent, received, or both.
        path: Extraction path used to read the value from a response row.
            Unused for REQUEST-only fields.
    """

    name: str
    type: Optional[FieldType] = FieldType.STRING
    direction: Direction = Direction.RESPONSE
    path: Optional[str] = None

    @property
    def is_request(self) -> bool:
        return self.direction.is_request

    @property
    def is_response(self) -> bool:
        return self.direction.is_response

    @property
    def is_request_only(self) -> bool:
        return self.direction is Direction.REQUEST


def project_fields(
    fields: Sequence[Field], indices: Optional[Sequence[int]] = None
) -> List[Field]:
    """Select output fields by original column index.

    `None` keeps every field in declared order. Otherwise the result follows
    `indices` exactly, so a repeated index repeats its field.
    """

    if indices is None:
        return list(fields)
    projected: List[Field] = []
    for index in indices:
        if index < 0 or index >= len(fields):
            raise IndexError(f"Projection index {index} is out of range.")
        projected.append(fields[index])
    return projected


def build_fields(table: "TableConfig") -> List[Field]:
    """Build column metadata from table parameter configuration.

    Parameters without a direction are not columns and are skipped. A
    response field without an explicit path is read by its own name.
    """

    built: List[Field] = []
    for param in table.parameters:
        if param.direction is None:
            continue
        path = (param.path or param.name) if param.direction.is_response else None
        built.append(
            Field(
                name=param.name,
                type=FieldType.of(param.type),
                direction=param.direction,
                path=path,
            )
        )
    return built
