"""Error types raised by the REST table adapter."""

from __future__ import annotations


class RestTableError(Exception):
    """Base class for adapter errors."""


class UnanswerableQueryError(RestTableError):
    """Raised when a query can never be answered from the remote API.

    A REQUEST-only field compared with anything other than `=` only ever sees
    the value the caller supplied, so the predicate cannot be evaluated. The
    query must stop; nothing inside this package catches this error.
    """

    def __init__(self, field_name: str, operator: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.operator = operator


class TranslationError(RestTableError, ValueError):
    """Raised when one predicate cannot be turned into a filter criterion."""


class ConfigError(RestTableError, ValueError):
    """Raised when service or table configuration is invalid."""


class ResponseParseError(RestTableError):
    """Raised when no parser accepts a response payload."""


class TransportError(RestTableError):
    """Raised when an HTTP request fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TemplateRenderError(RestTableError):
    """Raised when a request template cannot be rendered."""
