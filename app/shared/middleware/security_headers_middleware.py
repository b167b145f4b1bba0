# app/shared/middleware/security_headers_middleware.py (async version)

"""
Middleware for adding HTTP security headers to API responses.
"""

import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Configure logger
logger = logging.getLogger(__name__)

DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")

# The API serves JSON only, so the policy can forbid everything
API_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"


class AsyncSecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to JSON API responses.

    Documentation routes keep the browser defaults so Swagger UI loads.

    Args:
        app: ASGI application
        environment: Deployment environment
        use_https: Emit HSTS in production when True
    """

    def __init__(self, app, environment: str = "development", use_https: bool = False):
        super().__init__(app)
        self.environment = environment
        self.use_https = use_https

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        path = request.url.path
        is_docs_route = path == "/" or path.startswith(DOCS_PATHS)

        if not is_docs_route:
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            response.headers["Content-Security-Policy"] = API_CSP
            response.headers["Referrer-Policy"] = "no-referrer"

            # Responses may carry credentials or usage data
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"

        if "Server" in response.headers:
            response.headers["Server"] = "SMS Gateway"

        if self.environment == "production" and self.use_https:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
