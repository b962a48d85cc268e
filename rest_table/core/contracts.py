"""Core port contracts used by adapters and the table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol


@dataclass(frozen=True)
class HttpRequest:
    """Fully rendered HTTP request.

    Timeouts are in seconds; `0` means no timeout.
    """

    method: str
    url: str
    body: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    connect_timeout: float = 0
    read_timeout: float = 0


class TemplateRendererPort(Protocol):
    """Template engine behavior required to render URLs, bodies, and headers."""

    def render(self, template: str, variables: Mapping[str, Any]) -> str: ...


class TransportPort(Protocol):
    """HTTP client behavior required by `RestTable`."""

    def execute(self, request: HttpRequest) -> str: ...
