"""
Test configuration and shared fixtures for Broker Relay tests.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx
import pytest
from fastapi.testclient import TestClient

from broker_relay.core.config import Settings
from broker_relay.main import create_application


DHAN_HOST = "api.dhan.co"
FLATTRADE_HOST = "authapi.flattrade.in"

# Column layout of the real Dhan api-scrip-master.csv
MASTER_HEADER = [
    "SEM_EXM_EXCH_ID",
    "SEM_SEGMENT",
    "SEM_SMST_SECURITY_ID",
    "SEM_INSTRUMENT_NAME",
    "SEM_EXPIRY_CODE",
    "SEM_TRADING_SYMBOL",
    "SEM_LOT_UNITS",
    "SEM_CUSTOM_SYMBOL",
    "SEM_EXPIRY_DATE",
    "SEM_STRIKE_PRICE",
    "SEM_OPTION_TYPE",
    "SEM_TICK_SIZE",
    "SEM_EXPIRY_FLAG",
    "SEM_EXCH_INSTRUMENT_TYPE",
    "SEM_SERIES",
    "SM_SYMBOL_NAME",
]


def instrument_row(exch: str, sym: str, inst_type: str, opt: str, exp: str, sec_id: str) -> Dict[str, str]:
    """A security master row with only the columns the lookup reads filled in."""
    return {
        "SEM_EXM_EXCH_ID": exch,
        "SEM_TRADING_SYMBOL": sym,
        "SEM_EXCH_INSTRUMENT_TYPE": inst_type,
        "SEM_OPTION_TYPE": opt,
        "SEM_EXPIRY_DATE": exp,
        "SEM_SMST_SECURITY_ID": sec_id,
    }


def write_master(
    path: Path,
    rows: Iterable[Dict[str, str]],
    header: Sequence[str] = MASTER_HEADER,
) -> Path:
    """Write a security master CSV; columns a row does not set are left blank."""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(header), restval="", extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path


# =============================================================================
# Fake broker hosts
# =============================================================================

class FakeUpstream:
    """
    httpx.MockTransport handler standing in for the Dhan and Flattrade hosts.

    Responses are registered per (method, host, path). Every request seen is
    kept in ``requests`` for assertions. Unregistered calls get a 404.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[tuple, Dict[str, Any]] = {}

    def add(
        self,
        method: str,
        host: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        exc: Optional[type] = None,
    ) -> None:
        self._routes[(method.upper(), host, path)] = {
            "status_code": status_code,
            "json": json_body,
            "text": text,
            "headers": headers or {},
            "exc": exc,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.host, request.url.path))
        if route is None:
            return httpx.Response(404, json={"errorMessage": "not mocked"})
        if route["exc"] is not None:
            raise route["exc"]("upstream unreachable", request=request)
        if route["text"] is not None:
            return httpx.Response(route["status_code"], text=route["text"], headers=route["headers"])
        return httpx.Response(route["status_code"], json=route["json"], headers=route["headers"])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no upstream request was made"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    """Keep test runs from writing rotating log files."""
    monkeypatch.setenv("LOG_FILE_ENABLED", "false")


@pytest.fixture
def master_path(tmp_path) -> Path:
    """Security master with a small NIFTY / BANKNIFTY option chain."""
    return write_master(
        tmp_path / "api-scrip-master.csv",
        [
            instrument_row("NSE", "NIFTY-Oct2024-24000-CE", "OPTIDX", "CE", "2024-10-31 14:30:00", "35001"),
            instrument_row("NSE", "NIFTY-Oct2024-24000-PE", "OPTIDX", "PE", "2024-10-31 14:30:00", "35002"),
            instrument_row("NSE", "NIFTY-Nov2024-FUT", "FUTIDX", "XX", "2024-11-28 14:30:00", "35003"),
            instrument_row("NSE", "NIFTY-Nov2024-24500-CE", "OPTIDX", "CE", "2024-11-28 14:30:00", "35004"),
            instrument_row("NSE", "BANKNIFTY-Oct2024-51000-CE", "OPTIDX", "CE", "2024-10-30 14:30:00", "35005"),
            instrument_row("BSE", "NIFTY-Oct2024-24000-CE", "OPTIDX", "CE", "2024-10-31 14:30:00", "85001"),
        ],
    )


@pytest.fixture
def settings(master_path) -> Settings:
    return Settings(
        _env_file=None,
        DHAN_API_TOKEN="dhan-token",
        DHAN_CLIENT_ID="1100001111",
        DHAN_BASE_URL=f"https://{DHAN_HOST}",
        FLATTRADE_CLIENT_ID="FT0001",
        FLATTRADE_API_KEY="ft-key",
        FLATTRADE_API_SECRET="ft-secret",
        FLATTRADE_AUTH_URL=f"https://{FLATTRADE_HOST}",
        FRONTEND_ORIGIN="http://localhost:5173",
        SCRIP_MASTER_PATH=master_path,
        ENVIRONMENT="development",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(settings, upstream):
    """TestClient with the lifespan running and brokers faked."""
    application = create_application(settings, upstream_transport=upstream.transport)
    with TestClient(application) as test_client:
        yield test_client


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
