"""Service, table, and request configuration.

Configuration is plain data: frozen dataclasses built from mappings loaded
out of JSON or YAML files. Both the camelCase keys used by existing service
descriptions (`deepestArrayPath`, `filterFieldMappings`, ...) and snake_case
keys are accepted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError
from .fields import Direction


def _get(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}.")
    return data


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Setting '{name}' must be an integer, got {value!r}.") from exc


@dataclass(frozen=True)
class ParameterConfig:
    """One table parameter as described by the service metadata."""

    name: str
    direction: Optional[Direction] = None
    type: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ParameterConfig":
        data = _require_mapping(data, "Parameter")
        name = _get(data, "name")
        if not name:
            raise ConfigError("Parameter requires a 'name'.")
        raw_direction = _get(data, "direction")
        try:
            direction = Direction.of(raw_direction) if raw_direction else None
        except ValueError as exc:
            raise ConfigError(f"Parameter '{name}': {exc}") from exc
        return cls(
            name=str(name),
            direction=direction,
            type=_get(data, "dbType", "db_type", "type"),
            path=_get(data, "jsonpath", "path"),
        )


@dataclass(frozen=True)
class HeaderConfig:
    key: str
    value: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "HeaderConfig":
        data = _require_mapping(data, "Header")
        key = _get(data, "key", "name")
        if not key:
            raise ConfigError("Header requires a 'key'.")
        return cls(key=str(key), value=str(_get(data, "value", default="")))


@dataclass(frozen=True)
class RequestConfig:
    """How to reach an endpoint and render its requests.

    Attributes:
        addresses: Comma-separated base addresses tried in order.
        method: HTTP method, `GET` or `POST`.
        url: URL template appended to the address.
        url_template: Overrides `url` when set.
        body: Request body template.
        header_template: Template rendering all headers at once.
        headers: Static headers whose values are rendered as templates.
        connection_timeout: Connect timeout in seconds, `0` for none.
        response_timeout: Read timeout in seconds, `0` for none.
        default_content_type: Response content type, overriding properties.
        page_start: First page number exposed to templates.
        page_size: Rows per page, `0` disables pagination.
        filter_field_mappings: Field name to remote parameter name.
    """

    addresses: str = ""
    method: str = "GET"
    url: str = ""
    url_template: Optional[str] = None
    body: Optional[str] = None
    header_template: Optional[str] = None
    headers: Tuple[HeaderConfig, ...] = ()
    connection_timeout: int = 0
    response_timeout: int = 0
    default_content_type: Optional[str] = None
    page_start: int = 0
    page_size: int = 0
    filter_field_mappings: Mapping[str, str] = field(default_factory=dict)

    @property
    def address_list(self) -> List[str]:
        return [item.strip() for item in self.addresses.split(",") if item.strip()]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RequestConfig":
        data = _require_mapping(data, "Request config")
        mappings = _require_mapping(
            _get(data, "filterFieldMappings", "filter_field_mappings", default={}),
            "filterFieldMappings",
        )
        headers = tuple(
            HeaderConfig.from_mapping(item)
            for item in _get(data, "apiHeaders", "headers", default=())
        )
        return cls(
            addresses=str(_get(data, "addresses", "address", default="")),
            method=str(_get(data, "method", default="GET")).upper(),
            url=str(_get(data, "url", default="")),
            url_template=_get(data, "urlTemplate", "url_template"),
            body=_get(data, "body"),
            header_template=_get(data, "headerTemplate", "header_template"),
            headers=headers,
            connection_timeout=_as_int(
                _get(data, "connectionTimeout", "connection_timeout", default=0),
                "connectionTimeout",
            ),
            response_timeout=_as_int(
                _get(data, "responseTimeout", "response_timeout", default=0),
                "responseTimeout",
            ),
            default_content_type=_get(
                data, "defaultContentType", "default_content_type"
            ),
            page_start=_as_int(_get(data, "pageStart", "page_start", default=0), "pageStart"),
            page_size=_as_int(_get(data, "pageSize", "page_size", default=0), "pageSize"),
            filter_field_mappings={str(k): str(v) for k, v in mappings.items()},
        )


@dataclass(frozen=True)
class TableConfig:
    """One REST endpoint exposed as a table."""

    name: str
    array_path: str = "$"
    parameters: Tuple[ParameterConfig, ...] = ()
    request: Optional[RequestConfig] = None

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        default_request: Optional[RequestConfig] = None,
    ) -> "TableConfig":
        data = _require_mapping(data, "Table")
        name = _get(data, "name")
        if not name:
            raise ConfigError("Table requires a 'name'.")
        raw_request = _get(data, "requestConfig", "request")
        request = (
            RequestConfig.from_mapping(raw_request)
            if raw_request is not None
            else default_request
        )
        return cls(
            name=str(name),
            array_path=str(_get(data, "deepestArrayPath", "array_path", default="$")),
            parameters=tuple(
                ParameterConfig.from_mapping(item)
                for item in _get(data, "parameters", default=())
            ),
            request=request,
        )


@dataclass(frozen=True)
class ServiceConfig:
    """A REST service and the tables it exposes."""

    data_source_name: Optional[str] = None
    schema_name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    request: Optional[RequestConfig] = None
    tables: Tuple[TableConfig, ...] = ()

    def table(self, name: str) -> TableConfig:
        for item in self.tables:
            if item.name == name:
                return item
        raise KeyError(f"Unknown table: {name}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ServiceConfig":
        data = _require_mapping(data, "Service")
        raw_request = _get(data, "requestConfig", "request")
        request = RequestConfig.from_mapping(raw_request) if raw_request else None
        tables = tuple(
            TableConfig.from_mapping(item, default_request=request)
            for item in _get(data, "tables", default=())
        )
        names = [item.name for item in tables]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate table names: {duplicates}")
        return cls(
            data_source_name=_get(data, "dataSourceName", "data_source_name"),
            schema_name=_get(data, "schemaName", "schema_name"),
            version=_get(data, "version"),
            description=_get(data, "description"),
            request=request,
            tables=tables,
        )


def load_service_config(path: str | Path) -> ServiceConfig:
    """Load a service description from a `.json`, `.yaml`, or `.yml` file."""

    source = Path(path)
    text = source.read_text(encoding="utf-8")
    suffix = source.suffix.lower()
    try:
        if suffix == ".json":
            data: Dict[str, Any] = json.loads(text)
        elif suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            raise ConfigError(f"Unsupported config file type: {source.name}")
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse config file {source.name}: {exc}") from exc
    return ServiceConfig.from_mapping(data)
