"""Logging middleware for request tracking."""
import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.datastructures import QueryParams
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

# Query parameters that carry capabilities and must never reach the logs
REDACTED_QUERY_PARAMS = frozenset({"t", "token", "share_token"})
MAX_REQUEST_ID_LENGTH = 64


def redact_query_params(params: QueryParams) -> Optional[str]:
    """Render query params for logging with share tokens masked."""
    if not params:
        return None
    return "&".join(
        f"{key}={'***' if key in REDACTED_QUERY_PARAMS else value}"
        for key, value in params.multi_items()
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with a request id bound into the structlog context."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse a caller-supplied id so traces line up across services
        incoming = request.headers.get("X-Request-ID", "")
        request_id = incoming if 0 < len(incoming) <= MAX_REQUEST_ID_LENGTH else str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        start_time = time.perf_counter()
        logger.info("request_started", query_params=redact_query_params(request.query_params))

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception=str(exc),
                exception_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response
