"""Request dependencies: shared objects kept on app.state."""
from fastapi import Request

from broker_relay.brokers.dhan import DhanClient
from broker_relay.brokers.flattrade import FlattradeAuthClient
from broker_relay.brokers.registry import BrokerRegistry
from broker_relay.core.config import Settings
from broker_relay.services.dhan_proxy import DhanProxy
from broker_relay.services.instrument_lookup import InstrumentLookupService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_broker_registry(request: Request) -> BrokerRegistry:
    return request.app.state.broker_registry


def get_instrument_lookup(request: Request) -> InstrumentLookupService:
    return request.app.state.instrument_lookup


def get_dhan_client(request: Request) -> DhanClient:
    return request.app.state.dhan


def get_flattrade_client(request: Request) -> FlattradeAuthClient:
    return request.app.state.flattrade


def get_dhan_proxy(request: Request) -> DhanProxy:
    return request.app.state.dhan_proxy
