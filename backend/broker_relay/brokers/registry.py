"""
Broker registry.

Immutable table of the brokers this relay fronts, built once from settings
when the application starts.
"""

from typing import Tuple

from broker_relay.core.config import Settings
from broker_relay.schemas.broker import BrokerInfo


# Static registration metadata shown in the front end's broker list
REGISTERED_AT = "2023-09-01T12:00:00Z"
TOKEN_GENERATED_AT = "2023-10-01T12:00:00Z"


class BrokerRegistry:
    """Read-only broker metadata. The first entry is the primary broker."""

    def __init__(self, brokers: Tuple[BrokerInfo, ...]):
        if not brokers:
            raise ValueError("BrokerRegistry needs at least one broker")
        self._brokers = tuple(brokers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrokerRegistry":
        dhan = settings.dhan
        flattrade = settings.flattrade
        return cls((
            BrokerInfo(
                brokerClientId=dhan.client_id,
                brokerName="Dhan",
                appId="dhan-app-id",
                apiKey=dhan.api_token,
                apiSecret=dhan.api_token,
                status="Active",
                lastTokenGeneratedAt=TOKEN_GENERATED_AT,
                addedAt=REGISTERED_AT,
            ),
            BrokerInfo(
                brokerClientId=flattrade.client_id,
                brokerName="Flattrade",
                appId="flattrade-app-id",
                apiKey=flattrade.api_key,
                apiSecret=flattrade.api_secret,
                status="Active",
                lastTokenGeneratedAt=TOKEN_GENERATED_AT,
                addedAt=REGISTERED_AT,
            ),
        ))

    @property
    def brokers(self) -> Tuple[BrokerInfo, ...]:
        return self._brokers

    @property
    def primary(self) -> BrokerInfo:
        return self._brokers[0]
