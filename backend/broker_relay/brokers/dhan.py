"""
Dhan REST Client
Broker Relay

Thin async wrapper over the Dhan trading API (https://api.dhan.co).
Each call carries the account's access token in the ``access-token``
header and returns Dhan's JSON body unchanged.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from broker_relay.brokers.base import BaseBrokerClient
from broker_relay.core.config import DhanSettings
from broker_relay.schemas.broker import KillSwitchStatus


class DhanClient(BaseBrokerClient):
    """Dhan account, order and kill switch endpoints."""

    name = "Dhan"

    def __init__(
        self,
        config: DhanSettings,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config.base_url, timeout=timeout, transport=transport)
        self._access_token = config.api_token

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["access-token"] = self._access_token
        return headers

    async def get_fund_limit(self) -> Any:
        return await self._request("GET", "/fundlimit", "Failed to fetch fund limit")

    async def get_orders(self) -> Any:
        return await self._request("GET", "/orders", "Failed to fetch orders")

    async def get_positions(self) -> Any:
        return await self._request("GET", "/positions", "Failed to fetch positions")

    async def get_holdings(self) -> Any:
        return await self._request("GET", "/holdings", "Failed to fetch holdings")

    async def place_order(self, order: Dict[str, Any]) -> Any:
        """Forward an order to Dhan as-is."""
        logger.info(f"Placing Dhan order: {order}")
        return await self._request("POST", "/orders", "Failed to place order", json_data=order)

    async def cancel_order(self, order_id: str) -> Any:
        logger.info(f"Cancelling Dhan order {order_id}")
        return await self._request(
            "DELETE",
            f"/orders/{quote(str(order_id), safe='')}",
            "Failed to cancel order",
        )

    async def set_kill_switch(self, status: KillSwitchStatus) -> Any:
        """Activate or deactivate the account-wide kill switch."""
        logger.warning(f"Kill switch request: {status.value}")
        return await self._request(
            "POST",
            "/killSwitch",
            "Failed to activate Kill Switch",
            params={"killSwitchStatus": status.value},
        )
