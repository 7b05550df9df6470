"""FastAPI application exposing the pool engine.

Note: Authentication of the ``sender`` field is not implemented at the
application level. Caller identity is the host's concern and should be
enforced in front of this service.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from simpleswap import __version__
from simpleswap.api.endpoints import router
from simpleswap.errors import Expired, PoolError, TransferFailed
from simpleswap.models.requests import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SIMPLESWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("SIMPLESWAP_PORT", "8000"))
DEBUG = os.environ.get("SIMPLESWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB); every request is a handful of fields
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="SimpleSwap",
    description="Constant-product liquidity pool engine",
    version=__version__,
)


def status_for(err: PoolError) -> int:
    """HTTP status for a pool error."""
    if isinstance(err, Expired):
        return 409
    if isinstance(err, TransferFailed):
        return 502
    return 400


@app.exception_handler(PoolError)
async def pool_error_handler(_request: Request, err: PoolError) -> JSONResponse:
    """Report a rejected operation with its stable error code."""
    return JSONResponse(
        status_code=status_for(err),
        content=ErrorResponse(error=err.code, detail=str(err)).model_dump(),
    )


@app.exception_handler(ValueError)
async def value_error_handler(_request: Request, err: ValueError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="INVALID_ARGUMENT", detail=str(err)).model_dump(),
    )


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def configure_logging() -> None:
    """Render structlog events as ISO-timestamped key/value lines.

    SIMPLESWAP_LOG_LEVEL selects the minimum level (default: INFO).
    """
    level_name = os.environ.get("SIMPLESWAP_LOG_LEVEL", "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - SIMPLESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - SIMPLESWAP_PORT: Port to bind to (default: 8000)
    - SIMPLESWAP_DEBUG: Enable debug/reload mode (default: false)
    - SIMPLESWAP_FEE_BPS, SIMPLESWAP_CUSTODY: see EngineConfig.from_env
    """
    configure_logging()
    logger.info("starting_api", host=HOST, port=PORT, debug=DEBUG)
    uvicorn.run(
        "simpleswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
