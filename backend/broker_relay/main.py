"""
Broker Relay - FastAPI Application
Main entry point with lifecycle management.

Request flow:
    Front end (browser)
        ↓
    CORS + error handlers
        ↓
    /symbols → InstrumentLookupService (security master CSV)
    /fundlimit, /placeOrder, ... → DhanClient
    /api/trade/apitoken, ... → FlattradeAuthClient
    /api/* → DhanProxy
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger

from broker_relay.api import api_router
from broker_relay.brokers.dhan import DhanClient
from broker_relay.brokers.flattrade import FlattradeAuthClient
from broker_relay.brokers.registry import BrokerRegistry
from broker_relay.core.config import Settings, get_settings
from broker_relay.core.errors import register_error_handlers
from broker_relay.core.logging import log_requests, setup_logging
from broker_relay.services.dhan_proxy import DhanProxy
from broker_relay.services.instrument_lookup import InstrumentLookupService


WELCOME_MESSAGE = "Welcome to the Proxy Server"


# =============================================================================
# Application Lifecycle
# =============================================================================

def _make_lifespan(
    settings: Settings,
    upstream_transport: Optional[httpx.AsyncBaseTransport],
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.
        Opens the upstream HTTP clients on startup and closes them on shutdown.
        """
        # ---------------------------------------------------------------------
        # Startup
        # ---------------------------------------------------------------------
        setup_logging(settings.logging)
        logger.info("=" * 60)
        logger.info(f"Starting {settings.PROJECT_NAME}...")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Security master: {settings.SCRIP_MASTER_PATH}")
        logger.info("=" * 60)

        if not settings.dhan.is_configured:
            logger.warning("⚠ Dhan credentials not configured - set DHAN_API_TOKEN and DHAN_CLIENT_ID")
        if not settings.flattrade.is_configured:
            logger.warning("⚠ Flattrade credentials not configured - set FLATTRADE_API_KEY and FLATTRADE_API_SECRET")
        if not settings.SCRIP_MASTER_PATH.exists():
            logger.warning(f"⚠ Security master not found at {settings.SCRIP_MASTER_PATH} - /symbols will fail")

        app.state.dhan = DhanClient(
            settings.dhan,
            timeout=settings.HTTP_TIMEOUT,
            transport=upstream_transport,
        )
        app.state.flattrade = FlattradeAuthClient(
            settings.flattrade,
            timeout=settings.HTTP_TIMEOUT,
            transport=upstream_transport,
        )
        app.state.dhan_proxy = DhanProxy(
            settings.dhan.base_url,
            timeout=settings.HTTP_TIMEOUT,
            transport=upstream_transport,
        )
        logger.info("✓ Broker clients ready")
        logger.info(f"Server is running on port {settings.PORT}")

        yield

        # ---------------------------------------------------------------------
        # Shutdown
        # ---------------------------------------------------------------------
        logger.info("Shutting down...")
        for name in ("dhan_proxy", "flattrade", "dhan"):
            try:
                await getattr(app.state, name).close()
            except Exception as e:
                logger.error(f"Error closing {name} client: {e}")
        logger.info("Shutdown complete")

    return lifespan


# =============================================================================
# Application Factory
# =============================================================================

def create_application(
    settings: Optional[Settings] = None,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to run with; defaults to the environment.
        upstream_transport: httpx transport for all broker calls. Tests pass
            an ``httpx.MockTransport`` here.
    """
    settings = settings or get_settings()

    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        description="Relay between the trading front end and the Dhan / Flattrade APIs",
        lifespan=_make_lifespan(settings, upstream_transport),
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    application.state.settings = settings
    application.state.broker_registry = BrokerRegistry.from_settings(settings)
    application.state.instrument_lookup = InstrumentLookupService(settings.SCRIP_MASTER_PATH)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.middleware("http")(log_requests)
    register_error_handlers(application)

    @application.get("/health")
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @application.get("/")
    async def root(
        code: Optional[str] = Query(None),
        client: Optional[str] = Query(None),
    ):
        """
        Root endpoint. Echoes ``code`` and ``client`` when a login redirect
        lands here, otherwise a welcome message.
        """
        if code and client:
            return {"code": code, "client": client}
        return PlainTextResponse(WELCOME_MESSAGE)

    application.include_router(api_router)

    return application


# Create application instance
app = create_application()


def run() -> None:
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "broker_relay.main:app",
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    run()
