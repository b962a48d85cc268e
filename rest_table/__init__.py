"""Read remote REST endpoints as relational tables."""

from .core import (
    ConfigError,
    Direction,
    E,
    Field,
    FieldType,
    FilterCriterion,
    QueryContext,
    ResponseParseError,
    ResponseParserChain,
    RestTableError,
    RowEnumerator,
    ServiceConfig,
    TableConfig,
    RequestConfig,
    TemplateRenderError,
    TranslationError,
    TransportError,
    UnanswerableQueryError,
    load_service_config,
    translate_predicate,
)
from .ports import HttpTransport, TemplateRenderer, build_request
from .table import RestTable

__all__ = [
    "RestTable",
    "RowEnumerator",
    "E",
    "Field",
    "FieldType",
    "Direction",
    "FilterCriterion",
    "QueryContext",
    "translate_predicate",
    "ResponseParserChain",
    "RequestConfig",
    "ServiceConfig",
    "TableConfig",
    "load_service_config",
    "HttpTransport",
    "TemplateRenderer",
    "build_request",
    "RestTableError",
    "ConfigError",
    "ResponseParseError",
    "TemplateRenderError",
    "TranslationError",
    "TransportError",
    "UnanswerableQueryError",
]
