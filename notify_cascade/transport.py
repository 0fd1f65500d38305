"""Single-shot JSON HTTP transport shared by all dispatchers."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from notify_cascade.security import SSRFSafeTransport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class TransportError(Exception):
    """The request never produced an HTTP response."""


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    text: str


class Transport:
    """
    Performs exactly one JSON request per call and reports the raw outcome.

    Status codes are never interpreted here; any response, 2xx or not, is
    returned as a ``TransportResponse``. Only network-level failures raise,
    as ``TransportError``.

    Args:
        timeout: httpx client timeout in seconds.
        block_private_networks: refuse hosts resolving to private/reserved IPs.
        http_transport: optional httpx transport override (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        block_private_networks: bool = False,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.block_private_networks = block_private_networks
        self.http_transport = http_transport

    def _client(self) -> httpx.AsyncClient:
        transport = self.http_transport
        if transport is None and self.block_private_networks:
            transport = SSRFSafeTransport()
        return httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def post(
        self,
        url: str,
        body: Any,
        method: str = "POST",
        headers: Optional[dict[str, str]] = None,
    ) -> TransportResponse:
        data = json.dumps(body, allow_nan=False).encode("utf-8")
        request_headers = httpx.Headers({"Content-Type": "application/json"})
        if headers:
            request_headers.update(headers)
        # httpx derives Content-Length from the encoded body
        request_headers.pop("Content-Length", None)

        try:
            async with self._client() as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=request_headers,
                    content=data,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return TransportResponse(status_code=response.status_code, text=response.text)
