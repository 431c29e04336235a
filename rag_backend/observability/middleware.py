"""
HTTP middleware for request tracing.

CorrelationMiddleware binds (or mints) the X-Correlation-ID for the
request and echoes it on the response. RequestLoggingMiddleware writes
one line when a request arrives and one when it completes or fails.

Dependencies: fastapi, starlette, rag_backend.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from rag_backend.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with timing; unhandled exceptions are logged and re-raised."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        request_context = {
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
        }

        logger.info(f"--> {route}", extra=request_context)
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"<-- {route} raised {type(e).__name__}",
                extra={**request_context, "process_time_ms": _elapsed_ms(started)},
            )
            raise

        logger.info(
            f"<-- {route} {response.status_code}",
            extra={
                **request_context,
                "status_code": response.status_code,
                "process_time_ms": _elapsed_ms(started),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Propagates X-Correlation-ID from request to logs and back to the client."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
