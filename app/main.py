# app/main.py (async version)

import logging
from datetime import datetime
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.openapi.utils import get_openapi
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.adapters.configuration.config import Settings, get_settings
from app.adapters.outbound.persistence.database import Database
from app.adapters.outbound.sms.delivery_client import DeliveryClient
from app.application.use_cases.usage_reset_use_cases import UsageResetScheduler
from app.shared.middleware import (
    AsyncExceptionMiddleware,
    AsyncRateLimiter,
    AsyncRateLimitingMiddleware,
    AsyncRequestLoggingMiddleware,
    AsyncSecurityHeadersMiddleware,
)
from app.shared.middleware.exception_middleware import error_body

SERVICE_NAME = "sms-gateway"

logger = logging.getLogger(__name__)


# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
# ────────────────────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Async context manager to handle startup and shutdown events.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    logger.info("Application starting up...")

    if settings.CREATE_TABLES_ON_STARTUP:
        await database.create_all()

    scheduler = None
    if settings.USAGE_RESET_ENABLED:
        scheduler = UsageResetScheduler(database)
        scheduler.start()
    app.state.usage_reset_scheduler = scheduler

    yield

    # Shutdown
    logger.info("Application shutting down...")
    if scheduler is not None:
        await scheduler.stop()
    await database.dispose()


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Invalid request payload", _validation_message(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )


def create_app(
        settings: Optional[Settings] = None,
        database: Optional[Database] = None,
        delivery_client: Optional[DeliveryClient] = None,
) -> FastAPI:
    """
    Build the application and its shared handles.

    Args:
        settings: Application settings; loaded from the environment when None
        database: Database handle; built from ``settings.DATABASE_URL`` when None
        delivery_client: Provider adapter; built from the SMS settings when None
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="SMS Gateway",
        description="Authenticated SMS gateway with per-client quotas",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)
    app.state.delivery_client = delivery_client or DeliveryClient.from_settings(settings)
    app.state.client_rate_limiter = AsyncRateLimiter(window_time=1.0)

    # Middlewares
    app.add_middleware(AsyncSecurityHeadersMiddleware, environment=settings.ENVIRONMENT,
                       use_https=settings.USE_HTTPS)
    app.add_middleware(AsyncRequestLoggingMiddleware, environment=settings.ENVIRONMENT)
    app.add_middleware(AsyncRateLimitingMiddleware, requests_per_second=settings.RATE_LIMIT_RPS)
    app.add_middleware(AsyncExceptionMiddleware, environment=settings.ENVIRONMENT)

    register_exception_handlers(app)

    # Routers
    from app.adapters.inbound.api.v1.router import api_router as api_v1_router

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def redirect_to_docs():
        return RedirectResponse(url="/docs")

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "time": datetime.now().isoformat(),
        }

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        spec = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )

        # Validation errors are returned as 400, never 422
        for schema in ("HTTPValidationError", "ValidationError"):
            spec.get("components", {}).get("schemas", {}).pop(schema, None)

        for path in spec.get("paths", {}).values():
            for op in path.values():
                op.get("responses", {}).pop("422", None)

        app.openapi_schema = spec
        return spec

    app.openapi = custom_openapi

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
