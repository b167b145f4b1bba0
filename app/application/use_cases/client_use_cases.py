# app/application/use_cases/client_use_cases.py (async version)

"""
Service for client management.

This module implements the administrative operations on API clients:
registration with one-time credentials, listing, partial update, usage
reset and soft deletion.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.outbound.persistence.models import Client
from app.adapters.outbound.persistence.models.client_model import (
    DEFAULT_RATE_LIMIT,
    DEFAULT_DAILY_LIMIT,
    DEFAULT_MONTHLY_LIMIT,
)
from app.adapters.outbound.persistence.repositories.client_repository import client_repository
from app.adapters.outbound.security.auth_client_manager import ClientAuthManager
from app.application.dtos.client_dto import ClientCreate, ClientUpdate, ClientCreateResponse
from app.application.ports.inbound import IClientUseCase
from app.domain.exceptions import ResourceNotFoundException, ResourceAlreadyExistsException

logger = logging.getLogger(__name__)


class AsyncClientService(IClientUseCase):
    """
    Service for client management.

    Args:
        db_session: Active SQLAlchemy session
        clock: Source of the current local time
    """

    def __init__(self, db_session: AsyncSession, clock: Callable[[], datetime] = datetime.now,
                 clients=client_repository):
        self.db_session = db_session
        self.clock = clock
        self.clients = clients

    async def _get_or_404(self, id: Any) -> Client:
        client = await self.clients.get_active_by_id(self.db_session, id)
        if not client:
            logger.warning(f"Client not found: ID {id}")
            raise ResourceNotFoundException("Client not found", resource_id=id)
        return client

    async def create_client(self, data: ClientCreate) -> ClientCreateResponse:
        """
        Register a client and issue its credentials.

        The plaintext secret exists only in the returned value; the
        database keeps its bcrypt hash.

        Raises:
            ResourceAlreadyExistsException: If the email is already registered
        """
        if await self.clients.email_exists(self.db_session, data.email):
            logger.warning(f"Attempt to create client with existing email: {data.email}")
            raise ResourceAlreadyExistsException("Client with this email already exists")

        api_key, api_secret = ClientAuthManager.generate_credentials()
        secret_hash = await ClientAuthManager.hash_secret(api_secret)
        now = self.clock()

        client = await self.clients.create(self.db_session, obj_in={
            "name": data.name,
            "email": data.email,
            "api_key": api_key,
            "api_secret_hash": secret_hash,
            "is_active": True,
            "rate_limit": data.rate_limit or DEFAULT_RATE_LIMIT,
            "daily_limit": data.daily_limit or DEFAULT_DAILY_LIMIT,
            "monthly_limit": data.monthly_limit or DEFAULT_MONTHLY_LIMIT,
            "last_reset": now,
            "last_monthly_reset": now,
        })

        logger.info(f"Client created: {client.id} ({client.email})")
        return ClientCreateResponse(
            client_id=client.id,
            name=client.name,
            email=client.email,
            api_key=api_key,
            api_secret=api_secret,
            rate_limit=client.rate_limit,
            daily_limit=client.daily_limit,
            monthly_limit=client.monthly_limit,
        )

    async def list_clients(self, is_active: Optional[bool] = None) -> List[Client]:
        return await self.clients.list(self.db_session, is_active=is_active)

    async def update_client(self, id: Any, data: ClientUpdate) -> Client:
        """
        Apply the fields present in ``data``.

        Raises:
            ResourceNotFoundException: Unknown client id
        """
        client = await self._get_or_404(id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return client
        return await self.clients.update(self.db_session, db_obj=client, obj_in=changes)

    async def reset_usage(self, id: Any) -> Client:
        """
        Zero both usage counters immediately.

        Raises:
            ResourceNotFoundException: Unknown client id
        """
        client = await self._get_or_404(id)
        client = await self.clients.reset_usage(self.db_session, client, self.clock())
        logger.info(f"Usage reset for client {id}")
        return client

    async def delete_client(self, id: Any) -> None:
        """
        Soft-delete a client; its send logs are kept.

        Raises:
            ResourceNotFoundException: Unknown client id
        """
        client = await self._get_or_404(id)
        await self.clients.soft_delete(self.db_session, client, self.clock())
        logger.info(f"Client {id} deleted")
