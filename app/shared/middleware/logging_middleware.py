# app/shared/middleware/logging_middleware.py (async version)

"""
Middleware for HTTP request logging.

Logs one line per request and one per response. Credential headers are
never logged; outside production the API key prefix is included so
requests can be traced to a client.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Configure logger
logger = logging.getLogger(__name__)


def _key_hint(request: Request) -> str:
    api_key = request.headers.get("x-api-key")
    return f"{api_key[:8]}..." if api_key else "N/A"


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request logging.

    Args:
        app: ASGI application
        environment: Deployment environment; "production" logs less detail
    """

    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next):
        production = self.environment == "production"
        client_host = request.client.host if request.client else "N/A"

        if production:
            logger.info(f"Request: {request.method} {request.url.path}")
        else:
            query_params = dict(request.query_params)
            logger.info(
                f"Request: {request.method} {request.url.path} | "
                f"Query: {query_params if query_params else 'N/A'} | "
                f"Client: {client_host} | "
                f"Key: {_key_hint(request)}"
            )

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} | "
            f"Time: {process_time:.4f}s"
        )
        return response
