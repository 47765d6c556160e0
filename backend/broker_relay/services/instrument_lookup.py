"""
Instrument Lookup Service
Broker Relay

Scans the Dhan security master (api-scrip-master.csv) for the option
contracts of one underlying on one exchange.

The file is streamed row by row and every field is resolved by its header
name, so column order in the master does not matter. Each call re-reads the
file from the start; nothing is cached between calls.
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

from loguru import logger

from broker_relay.core.errors import DataSourceError


# =============================================================================
# Constants
# =============================================================================

COL_EXCHANGE_ID = "SEM_EXM_EXCH_ID"
COL_TRADING_SYMBOL = "SEM_TRADING_SYMBOL"
COL_INSTRUMENT_TYPE = "SEM_EXCH_INSTRUMENT_TYPE"
COL_OPTION_TYPE = "SEM_OPTION_TYPE"
COL_EXPIRY_DATE = "SEM_EXPIRY_DATE"
COL_SECURITY_ID = "SEM_SMST_SECURITY_ID"

REQUIRED_COLUMNS = (
    COL_EXCHANGE_ID,
    COL_TRADING_SYMBOL,
    COL_INSTRUMENT_TYPE,
    COL_OPTION_TYPE,
    COL_EXPIRY_DATE,
    COL_SECURITY_ID,
)

# Index options and stock options
OPTION_INSTRUMENT_TYPES = frozenset({"OPTIDX", "OP"})

CALL_OPTION = "CE"
PUT_OPTION = "PE"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class StrikeEntry:
    """One option contract as returned to the front end."""
    trading_symbol: str
    expiry_date: str
    security_id: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "tradingSymbol": self.trading_symbol,
            "expiryDate": self.expiry_date,
            "securityId": self.security_id,
        }


@dataclass
class LookupResult:
    """Call and put strikes in file order plus the distinct expiries seen."""
    call_strikes: List[StrikeEntry] = field(default_factory=list)
    put_strikes: List[StrikeEntry] = field(default_factory=list)
    expiry_dates: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "callStrikes": [s.to_dict() for s in self.call_strikes],
            "putStrikes": [s.to_dict() for s in self.put_strikes],
            "expiryDates": list(self.expiry_dates),
        }


# =============================================================================
# Service
# =============================================================================

class InstrumentLookupService:
    """
    Option strike lookup over a security master CSV.

    Usage:
        service = InstrumentLookupService("api-scrip-master.csv")
        result = service.lookup("NSE", "NIFTY")
    """

    def __init__(self, master_path: Union[str, Path]):
        self.master_path = Path(master_path)

    def lookup(self, exchange_symbol: str, master_symbol: str) -> LookupResult:
        """
        Find the option contracts of ``master_symbol`` listed on ``exchange_symbol``.

        A row matches when its exchange id equals ``exchange_symbol`` and its
        trading symbol starts with ``master_symbol + "-"``. Matching rows that
        are not options are ignored entirely. Matching option rows add their
        expiry date to ``expiry_dates``; CE rows go to ``call_strikes`` and PE
        rows to ``put_strikes``.

        Raises:
            DataSourceError: the file cannot be read or a row does not fit
                the header. No partial result is returned.
        """
        prefix = f"{master_symbol}-"
        call_strikes: List[StrikeEntry] = []
        put_strikes: List[StrikeEntry] = []
        # dict keeps first-seen order
        expiry_dates: Dict[str, None] = {}
        scanned = 0

        for row in self._iter_rows():
            scanned += 1

            if row[COL_EXCHANGE_ID] != exchange_symbol:
                continue
            if not row[COL_TRADING_SYMBOL].startswith(prefix):
                continue
            if row[COL_INSTRUMENT_TYPE] not in OPTION_INSTRUMENT_TYPES:
                continue

            entry = StrikeEntry(
                trading_symbol=row[COL_TRADING_SYMBOL],
                expiry_date=row[COL_EXPIRY_DATE],
                security_id=row[COL_SECURITY_ID],
            )

            option_type = row[COL_OPTION_TYPE]
            if option_type == CALL_OPTION:
                call_strikes.append(entry)
            elif option_type == PUT_OPTION:
                put_strikes.append(entry)

            expiry_dates[row[COL_EXPIRY_DATE]] = None

        logger.debug(
            f"Lookup {exchange_symbol}:{master_symbol} scanned {scanned} rows -> "
            f"{len(call_strikes)} calls, {len(put_strikes)} puts, {len(expiry_dates)} expiries"
        )

        return LookupResult(
            call_strikes=call_strikes,
            put_strikes=put_strikes,
            expiry_dates=list(expiry_dates),
        )

    def _iter_rows(self) -> Iterator[Dict[str, str]]:
        """Stream data rows as header-keyed dicts, validating each against the header."""
        try:
            with self.master_path.open("r", encoding="utf-8-sig", newline="") as f:
                reader = csv.reader(f)
                header = next(reader, None)
                if header is None:
                    raise DataSourceError(f"Security master {self.master_path} is empty")

                header = [name.strip() for name in header]
                missing = [col for col in REQUIRED_COLUMNS if col not in header]
                if missing:
                    raise DataSourceError(
                        f"Security master is missing columns: {', '.join(missing)}"
                    )

                width = len(header)
                for values in reader:
                    if not values:
                        continue
                    if len(values) != width:
                        raise DataSourceError(
                            f"Security master line {reader.line_num}: expected {width} "
                            f"columns, got {len(values)}"
                        )
                    yield dict(zip(header, values))

        except DataSourceError:
            raise
        except FileNotFoundError as e:
            raise DataSourceError(f"Security master not found: {self.master_path}") from e
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            raise DataSourceError(f"Failed to read security master: {e}") from e
