import sys
import time

from fastapi import Request
from loguru import logger

from broker_relay.core.config import LoggingSettings

# Requests slower than this are logged at warning level
SLOW_REQUEST_SECONDS = 1.0


def setup_logging(config: LoggingSettings) -> None:
    logger.remove()

    # Console Handler
    logger.add(
        sys.stderr,
        format=config.format,
        level=config.level,
        colorize=True,
    )

    if config.file_enabled:
        # Structured JSON for log shipping
        logger.add(
            config.file_path,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression="zip",
            serialize=True,
            level=config.level,
        )

        # Upstream failures and CSV errors land here with tracebacks
        logger.add(
            config.error_file_path,
            rotation=config.file_rotation,
            retention=config.file_retention,
            level="ERROR",
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Logging initialized (level={config.level}, files={'on' if config.file_enabled else 'off'})")


async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    line = f"{request.method} {request.url.path} - Status: {response.status_code} - Time: {elapsed:.3f}s"
    if response.status_code >= 400 or elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(line)
    else:
        logger.debug(line)

    response.headers["X-Process-Time"] = f"{elapsed:.3f}"
    return response
