"""Per-execution query state shared by translation, rendering, and enumeration."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .fields import Field


class QueryContext:
    """State owned by exactly one query execution.

    Holds the template variables used to render requests and the request
    values bound by equality predicates on request fields. Field metadata
    stays immutable, so concurrent executions over the same table never
    observe each other's bound values.
    """

    def __init__(self, variables: Optional[Mapping[str, Any]] = None) -> None:
        self.variables: Dict[str, Any] = dict(variables or {})
        self._bound: Dict[str, Any] = {}

    def bind(self, field: Field, value: Any) -> None:
        """Bind a request value for `field` and expose it to templates."""

        self._bound[field.name] = value
        self.variables[field.name] = value

    def bound_value(self, name: str) -> Any:
        """Return the value bound for field `name`, or `None`."""

        return self._bound.get(name)

    def is_bound(self, name: str) -> bool:
        return name in self._bound

    @property
    def bound_values(self) -> Dict[str, Any]:
        return dict(self._bound)
