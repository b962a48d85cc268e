"""Expose one REST endpoint as a filterable, projectable table."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .core.config import RequestConfig, ServiceConfig, TableConfig
from .core.context import QueryContext
from .core.contracts import TemplateRendererPort, TransportPort
from .core.enumerator import RowEnumerator
from .core.errors import ConfigError, ResponseParseError, TransportError
from .core.expressions import Expression
from .core.fields import Field, build_fields, project_fields
from .core.normal_form import conjunction, to_cnf, to_dnf
from .core.parsers import ResponseParserChain
from .core.readers.base import Row
from .core.template_context import TemplateContextBuilder
from .core.types import FilterGroups
from .ports.http.request_builder import build_request
from .ports.http.templates import TemplateRenderer
from .ports.http.transport import HttpTransport

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"


class RestTable:
    """A REST endpoint read as rows.

    Each `scan` pushes the filters it can into the request, fetches the
    first page, and returns a `RowEnumerator` that pulls further pages on
    demand.

    Args:
        table: Table description: name, array path, and parameters.
        request: Request configuration. Defaults to `table.request`.
        transport: HTTP client. Defaults to an `HttpTransport` owned by the
            table.
        renderer: Template engine. Defaults to `TemplateRenderer`.
        parsers: Response parsers. Defaults to CSV, XML, and JSON.
        properties: Connection properties exposed to templates.
    """

    def __init__(
        self,
        table: TableConfig,
        request: Optional[RequestConfig] = None,
        *,
        transport: Optional[TransportPort] = None,
        renderer: Optional[TemplateRendererPort] = None,
        parsers: Optional[ResponseParserChain] = None,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        resolved = request or table.request
        if resolved is None:
            raise ConfigError(f"Table '{table.name}' has no request configuration.")
        self.table = table
        self.request = resolved
        self.fields: List[Field] = build_fields(table)
        self._owns_transport = transport is None
        self.transport: TransportPort = transport or HttpTransport()
        self.renderer: TemplateRendererPort = renderer or TemplateRenderer()
        self.parsers = parsers or ResponseParserChain.default()
        self.properties: Dict[str, Any] = dict(properties or {})
        self._context_builder = TemplateContextBuilder()

    @classmethod
    def from_service(cls, service: ServiceConfig, name: str, **kwargs: Any) -> "RestTable":
        """Build the table `name` of a loaded service description."""

        table = service.table(name)
        return cls(table, table.request or service.request, **kwargs)

    @property
    def name(self) -> str:
        return self.table.name

    def scan(
        self,
        filters: Sequence[Expression] = (),
        projection: Optional[Sequence[int]] = None,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> RowEnumerator:
        """Query the endpoint.

        Args:
            filters: Host filter expressions, combined with `AND`.
            projection: Field indices to output, in output order.
            properties: Per-query properties overriding the table's.

        Raises:
            UnanswerableQueryError: A filter compares a REQUEST-only field
                with an operator other than `=`.
            TransportError: Every configured address failed.
        """

        merged = {**self.properties, **(properties or {})}
        combined = conjunction(filters)
        query = _Query(
            context=QueryContext(),
            dnf=to_dnf(combined),
            cnf=to_cnf(combined),
            properties=merged,
            projected_names=self._projected_names(projection),
        )

        address, rows = self._first_page(query)
        pages = _PageSource(self, query, address, rows)
        return RowEnumerator(
            rows, self.fields, projection, fetch_more=pages, context=query.context
        )

    def close(self) -> None:
        if self._owns_transport:
            close = getattr(self.transport, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> "RestTable":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def content_type(self, properties: Mapping[str, Any]) -> str:
        """Configured content type, then the `contentType` property, then JSON."""

        if self.request.default_content_type:
            return self.request.default_content_type
        if properties.get("contentType") is not None:
            return str(properties["contentType"])
        return DEFAULT_CONTENT_TYPE

    def fetch_page(self, address: str, query: "_Query", offset: int) -> List[Row]:
        """Render, send, and parse one page request against `address`."""

        self._context_builder.fill(
            query.context,
            self.request,
            self.fields,
            self.name,
            dnf_filters=query.dnf,
            cnf_filters=query.cnf,
            offset=offset,
            properties=query.properties,
            projected_names=query.projected_names,
        )
        request = build_request(address, self.request, query.context.variables, self.renderer)
        payload = self.transport.execute(request)
        if not self.table.parameters:
            return []
        return self.parsers.parse(
            payload, self.content_type(query.properties), self.table.array_path
        )

    def _first_page(self, query: "_Query") -> Tuple[str, List[Row]]:
        errors: List[str] = []
        for address in self.request.address_list:
            try:
                return address, self.fetch_page(address, query, 0)
            except (TransportError, ResponseParseError) as exc:
                logger.warning("Request to %s failed: %s", address, exc)
                errors.append(f"{address}: {exc}")
        if not errors:
            raise ConfigError(f"Table '{self.name}' has no addresses configured.")
        raise TransportError("All request attempts failed: " + ", \n".join(errors))

    def _projected_names(self, projection: Optional[Sequence[int]]) -> List[str]:
        if projection is None:
            return []
        names: List[str] = []
        for field in project_fields(self.fields, projection):
            if field.name not in names:
                names.append(field.name)
        return names


class _Query:
    """Inputs shared by every page request of one scan."""

    __slots__ = ("context", "dnf", "cnf", "properties", "projected_names")

    def __init__(
        self,
        context: QueryContext,
        dnf: FilterGroups,
        cnf: FilterGroups,
        properties: Mapping[str, Any],
        projected_names: Sequence[str],
    ) -> None:
        self.context = context
        self.dnf = dnf
        self.cnf = cnf
        self.properties = properties
        self.projected_names = projected_names


class _PageSource:
    """Fetch-more callable for one scan.

    Further pages are requested from the address that answered the first
    page, `page_size` rows apart, until a short page is seen.
    """

    def __init__(self, table: RestTable, query: _Query, address: str, first_page: Sequence[Row]):
        self._table = table
        self._query = query
        self._address = address
        self._page_size = table.request.page_size
        self._offset = 0
        self._has_more = self._page_size > 0 and len(first_page) == self._page_size

    def __call__(self) -> List[Row]:
        if not self._has_more:
            return []
        self._offset += self._page_size
        page = self._table.fetch_page(self._address, self._query, self._offset)
        self._has_more = len(page) == self._page_size
        return page
