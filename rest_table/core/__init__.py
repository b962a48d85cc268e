"""Public core API for predicate translation, response reading, and enumeration."""

from .config import (
    HeaderConfig,
    ParameterConfig,
    RequestConfig,
    ServiceConfig,
    TableConfig,
    load_service_config,
)
from .context import QueryContext
from .converters import convert_value, text_of
from .enumerator import EnumeratorState, RowEnumerator
from .errors import (
    ConfigError,
    ResponseParseError,
    RestTableError,
    TemplateRenderError,
    TranslationError,
    TransportError,
    UnanswerableQueryError,
)
from .expressions import And, ColumnRef, Comparison, E, Expression, Literal, LiteralType, Not, Or
from .fields import Direction, Field, FieldType, build_fields, project_fields
from .normal_form import conjunction, push_negations, to_cnf, to_dnf
from .parsers import (
    CsvResponseParser,
    JsonResponseParser,
    ResponseParser,
    ResponseParserChain,
    XmlResponseParser,
)
from .readers import PayloadFormat, Row
from .template_context import TemplateContextBuilder
from .translator import (
    FilterCriterion,
    NotConvertible,
    Translated,
    TranslationFailure,
    TranslationOutcome,
    Unanswerable,
    coerce_literal,
    translate_predicate,
)

__all__ = [
    "And",
    "ColumnRef",
    "Comparison",
    "E",
    "Expression",
    "Literal",
    "LiteralType",
    "Not",
    "Or",
    "Direction",
    "Field",
    "FieldType",
    "build_fields",
    "project_fields",
    "QueryContext",
    "TemplateContextBuilder",
    "FilterCriterion",
    "NotConvertible",
    "Translated",
    "TranslationFailure",
    "TranslationOutcome",
    "Unanswerable",
    "coerce_literal",
    "translate_predicate",
    "conjunction",
    "push_negations",
    "to_cnf",
    "to_dnf",
    "PayloadFormat",
    "Row",
    "ResponseParser",
    "ResponseParserChain",
    "CsvResponseParser",
    "JsonResponseParser",
    "XmlResponseParser",
    "convert_value",
    "text_of",
    "EnumeratorState",
    "RowEnumerator",
    "HeaderConfig",
    "ParameterConfig",
    "RequestConfig",
    "ServiceConfig",
    "TableConfig",
    "load_service_config",
    "ConfigError",
    "ResponseParseError",
    "RestTableError",
    "TemplateRenderError",
    "TranslationError",
    "TransportError",
    "UnanswerableQueryError",
]
