"""FastAPI application exposing the fee router adapter.

The API is a client of the adapter: every call goes through the same
public operations and checks as an in-process caller.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from feeadapter.api.endpoints import router
from feeadapter.errors import (
    AlreadyInitialized,
    ArithmeticOverflow,
    DeadlineExpired,
    FeeAdapterError,
    FeeTooHigh,
    InvalidAddress,
    InvalidImplementation,
    NotInitialized,
    ReentrantCall,
    RouterCallFailed,
    SplitsInvalid,
    SystemHalted,
    SystemNotHalted,
    TransferFailed,
    Unauthorized,
)

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("FEE_ADAPTER_HOST", "0.0.0.0")
PORT = int(os.environ.get("FEE_ADAPTER_PORT", "8000"))
DEBUG = os.environ.get("FEE_ADAPTER_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# HTTP status for each adapter error
ERROR_STATUS: dict[type[FeeAdapterError], int] = {
    Unauthorized: 403,
    AlreadyInitialized: 409,
    NotInitialized: 409,
    SystemNotHalted: 409,
    ReentrantCall: 409,
    FeeTooHigh: 422,
    SplitsInvalid: 422,
    InvalidAddress: 422,
    InvalidImplementation: 422,
    DeadlineExpired: 422,
    ArithmeticOverflow: 422,
    TransferFailed: 400,
    RouterCallFailed: 502,
    SystemHalted: 503,
}

app = FastAPI(
    title="Fee Router Adapter",
    description="Fee-taking swap adapter in front of an exchange router",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(FeeAdapterError)
async def adapter_error_handler(request: Request, exc: FeeAdapterError) -> JSONResponse:
    """Turn an adapter error into a JSON error response."""
    status = ERROR_STATUS.get(type(exc), 400)
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status=status,
    )
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the adapter API server.

    Configuration via environment variables:
    - FEE_ADAPTER_HOST: Host to bind to (default: 0.0.0.0)
    - FEE_ADAPTER_PORT: Port to bind to (default: 8000)
    - FEE_ADAPTER_DEBUG: Enable debug/reload mode (default: false)
    - FEE_ADAPTER_ADMIN_TOKEN: Bearer token for /admin/* (admin disabled if unset)
    - FEE_ADAPTER_ADMIN_ACCOUNT: Account admin calls act as (default: deployer)
    - FEE_ADAPTER_ROUTER_ADDRESS, FEE_ADAPTER_FEE_BPS: see feeadapter.deploy
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ]
    )
    uvicorn.run(
        "feeadapter.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
