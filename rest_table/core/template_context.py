"""Populate the template-rendering context for one REST request.

The rendered context exposes, at minimum::

    {
        "offset": 0,
        "limit": 100,
        "pageStart": 1,
        "name": "employees",
        "projects": ["id", "name"],
        "filters_dnf": [[{"name": "age", "operator": ">=", "value": 25}]],
        "filters_cnf": [[{"name": "age", "operator": ">=", "value": 25}]],
    }

DNF groups are OR-of-ANDs; CNF groups are AND-of-ORs.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import RequestConfig
from .context import QueryContext
from .fields import Field
from .translator import (
    Translated,
    TranslationFailure,
    Unanswerable,
    translate_predicate,
)

logger = logging.getLogger(__name__)

# Host connection settings that are not template variables.
RESERVED_PROPERTIES = frozenset(
    {"model", "fun", "caseSensitive", "quotedCasing", "unquotedCasing"}
)


class TemplateContextBuilder:
    """Fills a `QueryContext` with paging, projection, and filter variables."""

    def fill(
        self,
        context: QueryContext,
        request: RequestConfig,
        fields: Sequence[Field],
        table_name: str,
        *,
        dnf_filters: Sequence[Sequence[Any]] = (),
        cnf_filters: Sequence[Sequence[Any]] = (),
        offset: int = 0,
        properties: Optional[Mapping[str, Any]] = None,
        projected_names: Sequence[str] = (),
    ) -> None:
        """Populate `context.variables` for one page request.

        Raises:
            UnanswerableQueryError: A filter compares a REQUEST-only field with
                an operator other than `=`.
        """

        variables = context.variables
        variables["offset"] = offset
        variables["limit"] = request.page_size
        variables["pageStart"] = request.page_start
        variables["name"] = table_name

        for key, value in (properties or {}).items():
            if key in RESERVED_PROPERTIES:
                continue
            variables[key] = str(value)

        if projected_names:
            variables["projects"] = [
                request.filter_field_mappings.get(name, name) for name in projected_names
            ]

        if dnf_filters:
            groups = self.convert_dnf(dnf_filters, fields, context, request)
            if groups is not None:
                variables["filters_dnf"] = groups
        if cnf_filters:
            variables["filters_cnf"] = self.convert_cnf(
                cnf_filters, fields, context, request
            )

    def convert_dnf(
        self,
        groups: Sequence[Sequence[Any]],
        fields: Sequence[Field],
        context: QueryContext,
        request: RequestConfig,
    ) -> Optional[List[List[Dict[str, Any]]]]:
        """Translate OR-of-AND groups.

        An untranslated leaf only loosens its AND group. A group left with no
        translated leaf matches every row, so the disjunction cannot be
        pushed at all and `None` is returned.
        """

        converted: List[List[Dict[str, Any]]] = []
        unconstrained = False
        for group in groups:
            items, _ = self._convert_group(group, fields, context, request)
            if items:
                converted.append(items)
            else:
                unconstrained = True
        return None if unconstrained else converted

    def convert_cnf(
        self,
        groups: Sequence[Sequence[Any]],
        fields: Sequence[Field],
        context: QueryContext,
        request: RequestConfig,
    ) -> List[List[Dict[str, Any]]]:
        """Translate AND-of-OR groups, keeping only groups translated in full."""

        converted: List[List[Dict[str, Any]]] = []
        for group in groups:
            items, complete = self._convert_group(group, fields, context, request)
            if complete and items:
                converted.append(items)
        return converted

    def _convert_group(
        self,
        group: Sequence[Any],
        fields: Sequence[Field],
        context: QueryContext,
        request: RequestConfig,
    ) -> Tuple[List[Dict[str, Any]], bool]:
        items: List[Dict[str, Any]] = []
        complete = True
        for node in group:
            outcome = translate_predicate(
                node, fields, context, request.filter_field_mappings
            )
            if isinstance(outcome, Unanswerable):
                outcome.unwrap()
            if isinstance(outcome, Translated):
                items.append(outcome.criterion.as_dict())
                continue
            complete = False
            if isinstance(outcome, TranslationFailure):
                logger.debug("Filter left to the host engine: %s", outcome.error)
            else:
                logger.debug("Filter left to the host engine: %s", outcome.reason)
        return items, complete
