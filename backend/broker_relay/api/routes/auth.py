"""Login redirect and Flattrade token exchange endpoints"""
import json
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import HTMLResponse
from loguru import logger

from broker_relay.api.deps import get_app_settings, get_flattrade_client
from broker_relay.brokers.flattrade import FlattradeAuthClient
from broker_relay.core.config import Settings
from broker_relay.core.errors import BadRequestError
from broker_relay.schemas.broker import RequestCodeExchange

router = APIRouter()

REDIRECT_PAGE = """<script>
  console.log('Sending message to parent window');
  window.opener.postMessage({message}, {origin});
  window.close();
</script>
"""


def _js_string(value: str) -> str:
    """JSON-encode a value for inlining in a <script> block."""
    return json.dumps(value).replace("</", "<\\/")


@router.get("/redirect", response_class=HTMLResponse)
async def login_redirect(
    request: Request,
    code: Optional[str] = Query(None),
    client: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
):
    """
    Landing page of a broker login popup.

    Posts ``{scheme}://{host}/redirect?request_code=..&client=..`` to the
    window that opened the popup, then closes it.
    """
    logger.info(f"Received request code for client: {client}")

    if not code or not client:
        raise BadRequestError("Invalid request: Missing request code or client")

    host = request.headers.get("host") or request.url.netloc
    query = urlencode({"request_code": code, "client": client})
    message = f"{request.url.scheme}://{host}/redirect?{query}"

    return HTMLResponse(
        REDIRECT_PAGE.format(
            message=_js_string(message),
            origin=_js_string(settings.FRONTEND_ORIGIN),
        )
    )


@router.post("/api/trade/apitoken")
async def request_api_token(
    payload: Any = Body(None),
    flattrade: FlattradeAuthClient = Depends(get_flattrade_client),
):
    """Forward a token request to Flattrade unchanged."""
    return await flattrade.request_api_token(payload)


@router.post("/api/exchange-request-code-for-token")
async def exchange_request_code_for_token(
    body: Optional[RequestCodeExchange] = Body(None),
    flattrade: FlattradeAuthClient = Depends(get_flattrade_client),
):
    if body is None or not body.is_complete:
        raise BadRequestError("Missing required parameters")
    return await flattrade.exchange_request_code(body.apiKey, body.requestCode, body.apiSecret)
