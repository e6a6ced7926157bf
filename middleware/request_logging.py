"""Request Logging Middleware

Logs method, path, status and duration of every HTTP request, tagged with
a short correlation id that is also returned as X-Request-ID.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.correlation_id = correlation_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{correlation_id}] {request.method} {request.url.path} failed after {duration_ms:.1f}ms")
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        log = logger.warning if response.status_code >= 500 else logger.info
        log(f"[{correlation_id}] {request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)")
        response.headers["X-Request-ID"] = correlation_id
        return response
