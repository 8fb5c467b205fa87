"""Global exception handling.

Backend failures inside scoring never reach this handler; the scorers fail
open to "no data". What lands here is either malformed input surfacing as a
ValueError or a genuine bug.
"""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, ValueError):
        logger.warning("invalid_input", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=400,
            content={"error": "invalid_input", "message": str(exc), "request_id": request_id},
        )

    logger.exception("unhandled_exception", request_id=request_id, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "request_id": request_id,
        },
    )
