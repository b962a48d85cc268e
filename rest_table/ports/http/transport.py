"""HTTP transport backed by `requests`."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import requests

from ...core.contracts import HttpRequest
from ...core.errors import TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """Executes rendered requests over one `requests.Session`.

    Args:
        session: Session to use. A session created here is closed by
            `close()`; a session passed in stays owned by the caller.
    """

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._owns_session = session is None
        self.session = session or requests.Session()

    def execute(self, request: HttpRequest) -> str:
        """Send `request` and return the response body decoded as UTF-8.

        Raises:
            TransportError: The request failed or the status is not 2xx.
        """

        logger.debug(
            "HTTP request: %s %s headers=%s body=%s",
            request.method,
            request.url,
            dict(request.headers),
            request.body if request.body is not None else "<none>",
        )
        try:
            response = self.session.request(
                request.method,
                request.url,
                data=request.body.encode("utf-8") if request.body is not None else None,
                headers=dict(request.headers),
                timeout=_timeout(request),
            )
        except requests.RequestException as exc:
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

        logger.debug(
            "HTTP response: status=%s headers=%s",
            response.status_code,
            dict(response.headers),
        )
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"Request failed, status code ({response.status_code})",
                status_code=response.status_code,
            )

        body = response.content.decode("utf-8", errors="replace")
        logger.debug("Response body: %s", body)
        return body

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _timeout(request: HttpRequest) -> Optional[Tuple[Optional[float], Optional[float]]]:
    connect = request.connect_timeout or None
    read = request.read_timeout or None
    if connect is None and read is None:
        return None
    return (connect, read)
