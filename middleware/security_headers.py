"""Security Headers Middleware

Adds security headers to HTTP responses of the storefront API.

The browser frontend calls this API cross-origin with credentials, so
framing and MIME sniffing are always refused. HSTS is only sent when the
API is served over HTTPS (config.HSTS_ENABLED).
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import config


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all HTTP responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and add security headers to response.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response with security headers added
        """
        response = await call_next(request)

        if not config.SECURITY_HEADERS_ENABLED:
            return response

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"

        if config.HSTS_ENABLED:
            # 1 year, all subdomains
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        response.headers["Referrer-Policy"] = "no-referrer-when-downgrade"

        # API responses are per-user; never cache them in shared caches
        if request.url.path.startswith("/api/"):
            response.headers.setdefault("Cache-Control", "no-store")

        return response
