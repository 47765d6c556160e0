"""Catch-all reverse proxy onto Dhan"""
from fastapi import APIRouter, Depends, Request

from broker_relay.api.deps import get_dhan_proxy
from broker_relay.services.dhan_proxy import DhanProxy

router = APIRouter()

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/api/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy_to_dhan(
    path: str,
    request: Request,
    proxy: DhanProxy = Depends(get_dhan_proxy),
):
    return await proxy.forward(request, path)
