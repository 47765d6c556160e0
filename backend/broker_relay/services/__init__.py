"""
Relay services.

- InstrumentLookupService: option strike lookup over the security master
- DhanProxy: streaming reverse proxy onto the Dhan host
"""

from broker_relay.services.instrument_lookup import (
    InstrumentLookupService,
    LookupResult,
    StrikeEntry,
)
from broker_relay.services.dhan_proxy import DhanProxy


__all__ = [
    "InstrumentLookupService",
    "LookupResult",
    "StrikeEntry",
    "DhanProxy",
]
