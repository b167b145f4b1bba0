# app/shared/middleware/__init__.py (async version)

from app.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from app.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware
from app.shared.middleware.rate_limiting_middleware import AsyncRateLimiter, AsyncRateLimitingMiddleware
from app.shared.middleware.security_headers_middleware import AsyncSecurityHeadersMiddleware

# Export all for easy imports
__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
    "AsyncRateLimiter",
    "AsyncRateLimitingMiddleware",
    "AsyncSecurityHeadersMiddleware"
]
