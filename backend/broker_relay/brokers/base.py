from typing import Any, Dict, Optional

import httpx
from loguru import logger

from broker_relay.core.errors import UpstreamError


class BaseBrokerClient:
    """
    Shared plumbing for broker REST clients.

    Owns one ``httpx.AsyncClient`` for the life of the application. Responses
    are returned as decoded JSON, untouched; transport failures and non-2xx
    statuses become ``UpstreamError``.
    """

    name = "broker"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self._client.aclose()
        logger.info(f"{self.name} client closed")

    async def _request(
        self,
        method: str,
        endpoint: str,
        error_message: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
    ) -> Any:
        """
        Make a request against the broker host.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL
            error_message: Caller-facing message used if the call fails
            params: Query parameters
            json_data: JSON body

        Returns:
            Decoded JSON body, or None for an empty body.

        Raises:
            UpstreamError: on transport failure or a non-2xx status.
        """
        headers = self._headers()
        if json_data is not None:
            headers["Content-Type"] = "application/json"

        try:
            response = await self._client.request(
                method=method,
                url=endpoint,
                headers=headers,
                params=params,
                json=json_data,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            payload = _decode(e.response)
            raise UpstreamError(
                error_message,
                upstream=payload,
                cause=f"{method} {endpoint} -> {e.response.status_code} {e.response.text[:500]}",
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(
                error_message,
                cause=f"{method} {endpoint} -> {type(e).__name__}: {e}",
            ) from e

        return _decode(response)


def _decode(response: httpx.Response) -> Any:
    """JSON body if there is one, the raw text otherwise."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
