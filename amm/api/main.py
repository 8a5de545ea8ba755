"""FastAPI application serving one constant-product pool.

Callers identify themselves in the request body; authentication belongs to
the infrastructure in front of this service.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm import __version__
from amm.api.endpoints import router
from amm.errors import (
    ArithmeticInvalidState,
    DeadlineExpired,
    Paused,
    PoolError,
    TransferFailed,
    Unauthorized,
)

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_PORT", "8000"))
DEBUG = os.environ.get("AMM_DEBUG", "false").lower() in ("true", "1", "yes")

# HTTP status per error class; anything else derived from PoolError is a 400
ERROR_STATUS: dict[type[PoolError], int] = {
    Unauthorized: 403,
    Paused: 409,
    DeadlineExpired: 408,
    TransferFailed: 402,
    ArithmeticInvalidState: 422,
}

app = FastAPI(
    title="Constant-Product Pool",
    description="Two-asset constant-product AMM pool engine",
    version=__version__,
)


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Report a rejected pool operation with its stable error code."""
    status = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        400,
    )
    logger.warning("pool_operation_rejected", path=request.url.path, error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status, content={"error": exc.code, "detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    - AMM_TOKEN0, AMM_TOKEN1, AMM_CONTROLLER: Pool identities
    """
    uvicorn.run(
        "amm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
