"""Broker metadata endpoints"""
from typing import Dict, List

from fastapi import APIRouter, Depends

from broker_relay.api.deps import get_broker_registry
from broker_relay.brokers.registry import BrokerRegistry
from broker_relay.schemas.broker import BrokerInfo

router = APIRouter()


@router.get("/brokers", response_model=List[BrokerInfo])
async def list_brokers(registry: BrokerRegistry = Depends(get_broker_registry)):
    """All brokers the relay is configured for."""
    return list(registry.brokers)


@router.get("/brokerClientId", response_model=Dict[str, str])
async def get_broker_client_id(registry: BrokerRegistry = Depends(get_broker_registry)):
    """Client id of the primary broker."""
    return {"brokerClientId": registry.primary.brokerClientId}
