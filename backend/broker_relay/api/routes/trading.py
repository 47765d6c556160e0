"""Dhan account and order endpoints"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from broker_relay.api.deps import get_dhan_client
from broker_relay.brokers.dhan import DhanClient
from broker_relay.core.errors import BadRequestError
from broker_relay.schemas.broker import CancelOrderRequest, KillSwitchStatus, PlaceOrderRequest

router = APIRouter()


@router.get("/fundlimit")
async def get_fund_limit(dhan: DhanClient = Depends(get_dhan_client)):
    """Fetch available funds from Dhan."""
    return await dhan.get_fund_limit()


@router.get("/getOrders")
async def get_orders(dhan: DhanClient = Depends(get_dhan_client)):
    """Fetch the order book from Dhan."""
    return await dhan.get_orders()


@router.get("/positions")
async def get_positions(dhan: DhanClient = Depends(get_dhan_client)):
    return await dhan.get_positions()


@router.get("/holdings")
async def get_holdings(dhan: DhanClient = Depends(get_dhan_client)):
    return await dhan.get_holdings()


@router.post("/placeOrder")
async def place_order(
    order: PlaceOrderRequest,
    dhan: DhanClient = Depends(get_dhan_client),
):
    """Place an order with Dhan using the fields the front end sent."""
    return await dhan.place_order(order.to_payload())


@router.delete("/cancelOrder")
async def cancel_order(
    body: Optional[CancelOrderRequest] = Body(None),
    dhan: DhanClient = Depends(get_dhan_client),
):
    if body is None or not body.orderId:
        raise BadRequestError("orderId is required")
    return await dhan.cancel_order(str(body.orderId))


@router.post("/killSwitch")
async def kill_switch(
    killSwitchStatus: Optional[str] = Query(None, description="ACTIVATE or DEACTIVATE"),
    dhan: DhanClient = Depends(get_dhan_client),
):
    """
    Activate or deactivate the Dhan kill switch.

    On failure the broker's error payload is returned under ``error``.
    """
    try:
        status = KillSwitchStatus(killSwitchStatus)
    except ValueError:
        raise BadRequestError(
            'Invalid killSwitchStatus value. Must be either "ACTIVATE" or "DEACTIVATE".'
        )
    return await dhan.set_kill_switch(status)
