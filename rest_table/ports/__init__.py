"""Public port exports for concrete adapter implementations."""

from .http import HttpTransport, TemplateRenderer, build_request

__all__ = [
    "HttpTransport",
    "TemplateRenderer",
    "build_request",
]
