"""HTTP transport, request building, and template rendering exports."""

from .request_builder import build_request, parse_header_block
from .templates import TemplateRenderer, create_environment, single_group, to_json
from .transport import HttpTransport

__all__ = [
    "HttpTransport",
    "TemplateRenderer",
    "build_request",
    "create_environment",
    "parse_header_block",
    "single_group",
    "to_json",
]
