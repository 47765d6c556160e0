"""
Flattrade Auth Client
Broker Relay

Flattrade's login flow ends with the front end holding a short-lived
request code. The code, API key and API secret are exchanged for an API
token at https://authapi.flattrade.in/trade/apitoken.
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from broker_relay.brokers.base import BaseBrokerClient
from broker_relay.core.config import FlattradeSettings


class FlattradeAuthClient(BaseBrokerClient):
    """Flattrade token exchange."""

    name = "Flattrade"
    TOKEN_ENDPOINT = "/trade/apitoken"

    def __init__(
        self,
        config: FlattradeSettings,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.auth_url, timeout=timeout, transport=transport)

    async def request_api_token(self, payload: Any) -> Any:
        """Forward a token request body to Flattrade verbatim."""
        return await self._request(
            "POST",
            self.TOKEN_ENDPOINT,
            "Failed to request Flattrade API token",
            json_data=payload,
        )

    async def exchange_request_code(self, api_key: str, request_code: str, api_secret: str) -> Any:
        """Exchange a login request code for an API token."""
        body: Dict[str, str] = {
            "api_key": api_key,
            "request_code": request_code,
            "api_secret": api_secret,
        }
        logger.info("Exchanging Flattrade request code for token")
        return await self._request(
            "POST",
            self.TOKEN_ENDPOINT,
            "Failed to exchange request code for token",
            json_data=body,
        )
