# app/shared/middleware/exception_middleware.py (async version)

"""
Middleware for centralized exception handling.

This module defines middleware that intercepts exceptions and formats
them into the ``{success, message, error}`` error envelope.
"""

import time
import logging
import traceback
from typing import Callable, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from app.domain.exceptions import DomainException

# Configure logger
logger = logging.getLogger(__name__)

# Mapping from pure exception code to HTTP status
STATUS_BY_CODE: Dict[str, int] = {
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "CLIENT_INACTIVE": status.HTTP_403_FORBIDDEN,
    "RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RESOURCE_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "QUOTA_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
    "TRANSPORT_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "DATABASE_OPERATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_body(message: str, error: Optional[str] = None) -> dict:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures specific exceptions and formats the response accordingly.

    Args:
        app: ASGI application
        environment: Deployment environment; "production" hides exception text
    """

    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self.environment = environment

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        client_host = request.client.host if request.client else "N/A"
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except DomainException as exc:
            status_code = STATUS_BY_CODE.get(exc.internal_code, status.HTTP_400_BAD_REQUEST)
            log = logger.error if status_code >= 500 else logger.warning
            log(
                f"Domain exception: {exc.message} | Code: {exc.internal_code} | "
                f"Path: {request.url.path}"
            )
            return JSONResponse(
                status_code=status_code,
                content=error_body(exc.message, exc.error),
            )

        except SQLAlchemyError as exc:
            if self.environment == "production":
                error_message = "Internal database error"
                logger.error(
                    f"Database error: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host}"
                )
            else:
                error_message = str(exc)
                logger.error(
                    f"Database error: {str(exc)} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host}"
                )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_body("Database error", error_message),
            )

        except Exception as exc:
            # Unhandled exceptions
            if self.environment == "production":
                error_message = "Internal server error"
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host}"
                )
            else:
                error_message = str(exc)
                stack_trace = traceback.format_exc()
                logger.exception(
                    f"Unhandled exception: {str(exc)} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host}\n"
                    f"Traceback: {stack_trace}"
                )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_body("Internal server error", error_message),
            )
