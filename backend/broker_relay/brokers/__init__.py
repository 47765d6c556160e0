"""
Broker Integrations
Broker Relay

- Dhan: account data, orders and kill switch over REST
- Flattrade: request-code to API token exchange
"""

from broker_relay.brokers.base import BaseBrokerClient
from broker_relay.brokers.dhan import DhanClient
from broker_relay.brokers.flattrade import FlattradeAuthClient
from broker_relay.brokers.registry import BrokerRegistry


__all__ = [
    "BaseBrokerClient",
    "DhanClient",
    "FlattradeAuthClient",
    "BrokerRegistry",
]
