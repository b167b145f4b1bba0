# app/application/use_cases/auth_use_cases.py (async version)

"""
Service for API client and administrator authentication.

This module validates API key/secret pairs against the stored clients,
applies the account status and quota gates, and checks the single
administrative credential pair.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.configuration.config import Settings
from app.adapters.outbound.persistence.repositories.client_repository import client_repository
from app.adapters.outbound.security.auth_client_manager import ClientAuthManager
from app.application.ports.inbound import IAuthUseCase
from app.application.ports.outbound import IClientRepository
from app.domain.exceptions import (
    MissingCredentialsException,
    InvalidCredentialsException,
    InactiveClientException,
    RateLimitExceededException,
)
from app.domain.models.client_domain_model import AuthenticatedClient
from app.domain.services.quota_service import QuotaService
from app.shared.middleware.rate_limiting_middleware import AsyncRateLimiter

logger = logging.getLogger(__name__)


class AsyncAuthService(IAuthUseCase):
    """
    Authenticator for the gateway.

    Args:
        db_session: Active SQLAlchemy session
        settings: Application settings holding the admin credential pair
        rate_limiter: Per-client requests-per-second limiter; skipped when None
        clients: Client repository
    """

    def __init__(
            self,
            db_session: AsyncSession,
            settings: Settings,
            rate_limiter: Optional[AsyncRateLimiter] = None,
            clients: IClientRepository = client_repository,
    ):
        self.db = db_session
        self.settings = settings
        self.rate_limiter = rate_limiter
        self.clients = clients

    async def authenticate(
            self,
            api_key: Optional[str],
            api_secret: Optional[str],
            enforce_quota: bool = True,
    ) -> AuthenticatedClient:
        """
        Validate an API key/secret pair.

        An unknown key and a wrong secret raise the same exception with
        the same text, and both spend one bcrypt verification.

        Args:
            api_key: Value of the X-API-Key header
            api_secret: Value of the X-API-Secret header
            enforce_quota: Apply the daily/monthly gates (send endpoints)

        Returns:
            The authenticated client

        Raises:
            MissingCredentialsException: Key or secret missing
            InvalidCredentialsException: Unknown key or wrong secret
            InactiveClientException: Client deactivated
            DailyLimitExceededException / MonthlyLimitExceededException: Quota used up
            RateLimitExceededException: Per-second rate exceeded
        """
        if not api_key or not api_secret:
            raise MissingCredentialsException()

        client_db = await self.clients.get_by_api_key(self.db, api_key)
        if client_db is None:
            await ClientAuthManager.dummy_verify()
            logger.warning("Authentication attempt with unknown API key")
            raise InvalidCredentialsException()

        if not await ClientAuthManager.verify_secret(api_secret, client_db.api_secret_hash):
            logger.warning(f"Authentication attempt with wrong secret for client {client_db.id}")
            raise InvalidCredentialsException()

        client = self.clients.to_domain(client_db)

        if not client.is_active:
            logger.warning(f"Authentication attempt with inactive client {client.id}")
            raise InactiveClientException()

        if enforce_quota:
            QuotaService.check_quota(client)

        if self.rate_limiter is not None:
            limited, _ = await self.rate_limiter.is_rate_limited(str(client.id), client.rate_limit)
            if limited:
                logger.warning(f"Per-second rate limit exceeded for client {client.id}")
                raise RateLimitExceededException()

        return AuthenticatedClient(client=client)

    async def basic_authenticate(self, username: str, password: str) -> None:
        """
        Validate the administrative credential pair in constant time.

        Raises:
            InvalidCredentialsException: If the pair does not match
        """
        if not ClientAuthManager.compare_admin_credentials(
                username or "", password or "",
                self.settings.ADMIN_USER, self.settings.ADMIN_PASSWORD,
        ):
            logger.warning("Attempt with invalid administrative credentials")
            raise InvalidCredentialsException("Invalid credentials", "Invalid administrative credentials")
