"""Instrument lookup endpoint"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool
from loguru import logger

from broker_relay.api.deps import get_instrument_lookup
from broker_relay.core.errors import BadRequestError, DataSourceError
from broker_relay.services.instrument_lookup import InstrumentLookupService

router = APIRouter()


@router.get("/symbols", response_model=Dict[str, Any])
async def get_symbols(
    exchangeSymbol: Optional[str] = Query(None, description="Exchange id, e.g. NSE"),
    masterSymbol: Optional[str] = Query(None, description="Underlying symbol, e.g. NIFTY"),
    lookup: InstrumentLookupService = Depends(get_instrument_lookup),
):
    """
    Option strikes and expiries for an underlying.

    Returns ``{callStrikes, putStrikes, expiryDates}`` read from the
    security master.
    """
    if not exchangeSymbol or not masterSymbol:
        raise BadRequestError("exchangeSymbol and masterSymbol are required")

    try:
        result = await run_in_threadpool(lookup.lookup, exchangeSymbol, masterSymbol)
    except DataSourceError as e:
        raise DataSourceError("Failed to process CSV file", cause=e.message) from e

    logger.info(
        f"Symbols {exchangeSymbol}:{masterSymbol} -> {len(result.call_strikes)} calls, "
        f"{len(result.put_strikes)} puts, {len(result.expiry_dates)} expiries"
    )
    return result.to_dict()
