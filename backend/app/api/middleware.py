"""
Request middleware: request ids, access logging and the last-resort 500 envelope.

Typed AppErrors are rendered by the exception handlers in main.py; anything
that escapes them is logged here together with the calling user and company.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.errors import InternalServerError
from app.core.logging import bind_request, get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that:
    1. Assigns a unique request ID to each request
    2. Logs request method, path, status code, and duration
    3. Binds request context to structlog for correlation
    4. Turns any exception no handler claimed into the 500 error envelope
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        bind_request(request_id, request.method, request.url.path)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            # The authorization dependency stores who was calling, when it got that far
            logger.error(
                "request_failed",
                error=str(e),
                url=str(request.url),
                user_id=getattr(request.state, "user_id", None),
                company_slug=getattr(request.state, "company_slug", None),
                duration_ms=duration_ms,
                exc_info=e,
            )
            error = InternalServerError(cause=e)
            response = JSONResponse(status_code=error.status_code, content=error.to_dict())
            response.headers["X-Request-ID"] = request_id
            return response

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        # Add headers for observability
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        return response
