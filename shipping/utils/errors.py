from fastapi import status
from fastapi.responses import ORJSONResponse
import logging

logger = logging.getLogger(__name__)


def internal_error_response(
    message: str,
    trace_id: str,
    code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> ORJSONResponse:
    """Return a JSON error body carrying the trace id and log it."""
    logger.error("%s (trace_id=%s)", message, trace_id)
    return ORJSONResponse(status_code=code, content={"error": message, "trace_id": trace_id})
