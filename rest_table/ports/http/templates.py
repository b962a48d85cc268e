"""Jinja2 rendering of request URL, body, and header templates."""

from __future__ import annotations

import json
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ...core.converters import text_of
from ...core.errors import TemplateRenderError


def _finalize(value: Any) -> Any:
    # Applied to every `{{ ... }}` output.
    if value is None:
        return ""
    if isinstance(value, (bool, datetime, date, time)):
        return text_of(value)
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Template filter rendering a value as JSON."""

    return json.dumps(value, default=_json_default)


def single_group(groups: Optional[Sequence[Sequence[Any]]]) -> List[Any]:
    """Template filter returning the only AND group of `filters_dnf`.

    Endpoints that accept flat filters can only express one conjunction.

    Raises:
        TemplateRenderError: More than one OR branch was requested.
    """

    if not groups:
        return []
    if len(groups) > 1:
        raise TemplateRenderError(
            f"Endpoint accepts a single filter group, got {len(groups)} OR groups."
        )
    return list(groups[0])


def create_environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        finalize=_finalize,
    )
    env.filters["json"] = to_json
    env.filters["single_group"] = single_group
    return env


class TemplateRenderer:
    """Renders template strings against a query context.

    Compiled templates are cached per renderer, keyed by source text.
    """

    def __init__(self, environment: Optional[Environment] = None) -> None:
        self.environment = environment or create_environment()
        self._cache: Dict[str, Template] = {}

    def template(self, source: str) -> Template:
        compiled = self._cache.get(source)
        if compiled is None:
            try:
                compiled = self.environment.from_string(source)
            except TemplateError as exc:
                raise TemplateRenderError(f"Invalid template {source!r}: {exc}") from exc
            self._cache[source] = compiled
        return compiled

    def render(self, template: str, variables: Mapping[str, Any]) -> str:
        """Render `template` and strip surrounding whitespace.

        Raises:
            TemplateRenderError: The template is invalid, references an
                undefined variable, or a filter rejected its input.
        """

        try:
            text = self.template(template).render(dict(variables))
        except TemplateError as exc:
            raise TemplateRenderError(f"Cannot render template {template!r}: {exc}") from exc
        return text.strip()
