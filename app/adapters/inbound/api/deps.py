# app/adapters/inbound/api/deps.py (async version)

"""
Dependencies for injection into API endpoints.

This module defines functions that provide dependencies via FastAPI
Depends() for database access, API key authentication, admin basic
authentication and use case construction. Every shared handle comes from
``app.state``, populated by ``create_app``.
"""

import logging
from typing import AsyncGenerator, Optional
from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.configuration.config import Settings
from app.application.use_cases.auth_use_cases import AsyncAuthService
from app.application.use_cases.client_use_cases import AsyncClientService
from app.application.use_cases.sms_use_cases import AsyncSmsService
from app.domain.exceptions import InvalidCredentialsException
from app.domain.models.client_domain_model import AuthenticatedClient
from app.domain.models.sms_domain_model import RequestMetadata

# Configure logger
logger = logging.getLogger(__name__)

# auto_error=False so a missing header goes through our own error envelope
basic_scheme = HTTPBasic(auto_error=False)


########################################################################
# Application handles
########################################################################

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency injection of an async session for one request.

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    async with request.app.state.database.session() as session:
        yield session


def get_request_metadata(request: Request) -> RequestMetadata:
    return RequestMetadata(
        ip_address=request.client.host if request.client else "",
        user_agent=request.headers.get("user-agent", ""),
    )


########################################################################
# API key authentication
########################################################################

def get_auth_service(
        request: Request,
        db: AsyncSession = Depends(get_db),
) -> AsyncAuthService:
    return AsyncAuthService(
        db,
        request.app.state.settings,
        rate_limiter=request.app.state.client_rate_limiter,
    )


async def get_sending_client(
        x_api_key: Optional[str] = Header(None),
        x_api_secret: Optional[str] = Header(None),
        auth_service: AsyncAuthService = Depends(get_auth_service),
) -> AuthenticatedClient:
    """
    Authenticate the caller of a send endpoint, quota gates included.
    """
    return await auth_service.authenticate(x_api_key, x_api_secret, enforce_quota=True)


async def get_reading_client(
        x_api_key: Optional[str] = Header(None),
        x_api_secret: Optional[str] = Header(None),
        auth_service: AsyncAuthService = Depends(get_auth_service),
) -> AuthenticatedClient:
    """
    Authenticate the caller of a read-only endpoint; quotas are not checked.
    """
    return await auth_service.authenticate(x_api_key, x_api_secret, enforce_quota=False)


########################################################################
# Admin basic authentication
########################################################################

async def require_admin(
        credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
        settings: Settings = Depends(get_settings),
) -> str:
    """
    Gate administrative endpoints behind the configured credential pair.

    Returns:
        Admin username

    Raises:
        HTTPException: 401 with a Basic challenge on missing or wrong credentials
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization required",
            headers={"WWW-Authenticate": "Basic"},
        )

    try:
        await AsyncAuthService(None, settings).basic_authenticate(credentials.username, credentials.password)
    except InvalidCredentialsException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.error,
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


########################################################################
# Use cases
########################################################################

def get_sms_service(
        request: Request,
        db: AsyncSession = Depends(get_db),
) -> AsyncSmsService:
    settings = request.app.state.settings
    return AsyncSmsService(
        db,
        request.app.state.delivery_client,
        default_sender_id=settings.SMS_SENDER_ID,
        country_code=settings.DEFAULT_COUNTRY_CODE,
    )


def get_client_service(db: AsyncSession = Depends(get_db)) -> AsyncClientService:
    return AsyncClientService(db)
