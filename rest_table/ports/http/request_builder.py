"""Assemble rendered HTTP requests from request configuration."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping

from ...core.config import RequestConfig
from ...core.contracts import HttpRequest, TemplateRendererPort
from ...core.converters import text_of

logger = logging.getLogger(__name__)


def build_request(
    address: str,
    config: RequestConfig,
    variables: Mapping[str, Any],
    renderer: TemplateRendererPort,
) -> HttpRequest:
    """Render one request against `address`.

    The URL template (or plain URL) is rendered and appended to the address.
    Headers come from the header template when one is configured, otherwise
    from the static headers with rendered values.
    """

    url_template = config.url_template if config.url_template is not None else config.url
    url = address + renderer.render(url_template, variables)

    method = "POST" if config.method.upper() == "POST" else "GET"
    body = renderer.render(config.body, variables) if config.body is not None else None

    if config.header_template is not None:
        headers = parse_header_block(renderer.render(config.header_template, variables))
    else:
        headers = {
            header.key: renderer.render(header.value, variables) for header in config.headers
        }

    return HttpRequest(
        method=method,
        url=url,
        body=body,
        headers=headers,
        connect_timeout=config.connection_timeout,
        read_timeout=config.response_timeout,
    )


def parse_header_block(text: str) -> Dict[str, str]:
    """Read rendered header-template output.

    Accepts a JSON object (`{"X-Key": "v"}`) or `key: value` lines. Lines
    without a colon, or with an empty name or value, are ignored.
    """

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Header template output is not JSON, reading 'key: value' lines.")
        return _parse_header_lines(text)

    if not isinstance(parsed, dict):
        logger.warning("Header template did not produce a JSON object: %s", text)
        return {}
    return {
        str(key): "" if value is None else text_of(value) for key, value in parsed.items()
    }


def _parse_header_lines(text: str) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for line in text.splitlines():
        name, sep, value = line.strip().partition(":")
        name = name.strip()
        value = value.strip()
        if sep and name and value:
            headers[name] = value
    return headers
