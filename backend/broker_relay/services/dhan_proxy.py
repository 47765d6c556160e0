"""
Dhan Reverse Proxy
Broker Relay

Forwards anything under ``/api`` to the Dhan host with the prefix removed,
so the front end can call Dhan endpoints the relay does not wrap without
running into CORS. Request and response bodies are streamed through.
"""

from typing import Dict, Iterable, Optional, Tuple

import httpx
from fastapi import Request
from fastapi.responses import StreamingResponse
from loguru import logger
from starlette.background import BackgroundTask

from broker_relay.core.errors import UpstreamError


HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
})

# Stripped from the outgoing request; httpx sets them for the target host
REQUEST_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}

# httpx hands back a decoded body, so the upstream length and encoding no longer apply
RESPONSE_EXCLUDED_HEADERS = HOP_BY_HOP_HEADERS | {"content-length", "content-encoding"}


def _filter_headers(headers: Iterable[Tuple[str, str]], excluded: frozenset) -> Dict[str, str]:
    return {k: v for k, v in headers if k.lower() not in excluded}


class DhanProxy:
    """Streaming reverse proxy onto the Dhan REST host."""

    def __init__(
        self,
        target_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.target_url = target_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.target_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Dhan proxy client closed")

    async def forward(self, request: Request, path: str) -> StreamingResponse:
        """
        Relay ``request`` to ``{target_url}/{path}``.

        Raises:
            UpstreamError: the target could not be reached.
        """
        upstream_path = "/" + path.lstrip("/")
        headers = _filter_headers(request.headers.items(), REQUEST_EXCLUDED_HEADERS)
        body = await request.body()

        upstream_request = self._client.build_request(
            method=request.method,
            url=upstream_path,
            params=request.query_params.multi_items(),
            headers=headers,
            content=body if body else None,
        )

        logger.info(f"Proxying request to: {upstream_request.method} {upstream_request.url.path}")
        logger.debug(f"Request headers: {headers}")

        try:
            upstream_response = await self._client.send(upstream_request, stream=True)
        except httpx.HTTPError as e:
            raise UpstreamError(
                "Error in proxying request",
                cause=f"{request.method} {upstream_path} -> {type(e).__name__}: {e}",
            ) from e

        logger.info(f"Received response with status: {upstream_response.status_code}")

        return StreamingResponse(
            upstream_response.aiter_bytes(),
            status_code=upstream_response.status_code,
            headers=_filter_headers(upstream_response.headers.items(), RESPONSE_EXCLUDED_HEADERS),
            background=BackgroundTask(upstream_response.aclose),
        )
