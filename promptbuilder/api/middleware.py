"""Custom middleware for the API."""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

# Polled by load balancers; logged at debug only
QUIET_PATHS = frozenset({"/api/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request and tag log lines emitted while serving it.

    Generation calls can run for minutes, so the request id (taken from the
    ``X-Request-ID`` header or generated) is bound into structlog's
    contextvars and shows up on every agent and service log line.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        log = logger.debug if path in QUIET_PATHS else logger.info

        log("request.started", method=request.method, path=path)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.crashed",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        duration_ms = (time.perf_counter() - start_time) * 1000
        log(
            "request.completed",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            request_id=request_id,
        )

        response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms:.2f}ms"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
