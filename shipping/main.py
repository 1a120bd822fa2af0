# shipping/main.py

import logging
import os
import time

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

from .api import api_shipping
from .core.config import settings
from .core.observability import get_trace_context, setup_logging, setup_meter, setup_tracer

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

_BOOT_TS = time.time()

app = FastAPI(title="Shipping Service", default_response_class=ORJSONResponse)
setup_meter()
setup_tracer(app)


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Turn unhandled errors into the same JSON shape as quote failures."""
    try:
        return await call_next(request)
    except Exception as exc:  # pragma: no cover - generic handler
        trace_id, _ = get_trace_context()
        logger.exception("Unhandled error at %s: %s", request.url.path, exc)
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error", "trace_id": trace_id},
        )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors with details and log them for debugging."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(errors)},
    )


@app.get("/healthz/live", tags=["health"])
async def health_live():
    """Liveness probe: process can respond; does not touch the oracle."""
    return {
        "status": "ok",
        "kind": "live",
        "service": settings.SERVICE_NAME,
        "uptime_s": round(time.time() - _BOOT_TS, 1),
        "pid": os.getpid(),
    }


app.include_router(api_shipping.router)
