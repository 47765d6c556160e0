"""API router initialization"""
from fastapi import APIRouter
from broker_relay.api.routes import symbols, brokers, trading, auth, proxy

api_router = APIRouter()

api_router.include_router(symbols.router, tags=["instruments"])
api_router.include_router(brokers.router, tags=["brokers"])
api_router.include_router(trading.router, tags=["trading"])
api_router.include_router(auth.router, tags=["auth"])
# Must stay last: /api/{path} would shadow the Flattrade routes above
api_router.include_router(proxy.router, tags=["proxy"])
