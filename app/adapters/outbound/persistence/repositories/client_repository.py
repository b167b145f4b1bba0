# app/adapters/outbound/persistence/repositories/client_repository.py (async version)

"""
Repository for client operations.

This module implements the repository that performs database operations
related to API clients: credential lookup, quota counters and resets.
"""

from datetime import datetime
from typing import Optional, List, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
from sqlalchemy.exc import SQLAlchemyError

from app.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from app.adapters.outbound.persistence.models import Client
from app.application.ports.outbound import IClientRepository
from app.domain.models.client_domain_model import Client as DomainClient
from app.domain.exceptions import DatabaseOperationException


class AsyncClientCRUD(AsyncCRUDBase[Client], IClientRepository):
    """
    Async implementation of the repository for the Client entity.

    Soft-deleted clients are invisible to every lookup here.
    """

    def _live(self):
        return select(Client).where(Client.deleted_at.is_(None)).execution_options(populate_existing=True)

    async def get_active_by_id(self, db: AsyncSession, id: Any) -> Optional[Client]:
        """
        Find a non-deleted client by primary key.
        """
        try:
            result = await db.execute(self._live().where(Client.id == id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching client {id}: {str(e)}")
            raise DatabaseOperationException("Error fetching client", original_error=e)

    async def get_by_api_key(self, db: AsyncSession, api_key: str) -> Optional[Client]:
        """
        Find a non-deleted client by its public API key.

        Args:
            db: Async database session
            api_key: Public API key sent in the X-API-Key header

        Returns:
            Client found or None if it doesn't exist

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            result = await db.execute(self._live().where(Client.api_key == api_key))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching client by api_key: {str(e)}")
            raise DatabaseOperationException("Error fetching client by API key", original_error=e)

    async def email_exists(self, db: AsyncSession, email: str) -> bool:
        # Soft-deleted rows still hold the unique email
        try:
            result = await db.execute(select(Client.id).where(Client.email == email))
            return result.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking client email: {str(e)}")
            raise DatabaseOperationException("Error checking client email", original_error=e)

    async def list(self, db: AsyncSession, *, is_active: Optional[bool] = None) -> List[Client]:
        """
        List non-deleted clients, optionally filtered by active flag, oldest first.
        """
        try:
            query = self._live().order_by(Client.created_at.asc())
            if is_active is not None:
                query = query.where(Client.is_active.is_(is_active))
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing clients: {str(e)}")
            raise DatabaseOperationException("Error listing clients", original_error=e)

    async def increment_usage(self, db: AsyncSession, client_id: Any, amount: int) -> None:
        """
        Atomically add ``amount`` to both usage counters.

        Runs as a single ``UPDATE ... SET x = x + n`` so concurrent requests
        for the same client never lose increments.
        """
        if amount <= 0:
            return
        try:
            stmt = (
                update(Client)
                .where(Client.id == client_id)
                .values(
                    daily_usage=Client.daily_usage + amount,
                    monthly_usage=Client.monthly_usage + amount,
                )
                .execution_options(synchronize_session=False)
            )
            await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            self.logger.error(f"Error incrementing usage for client {client_id}: {str(e)}")
            raise DatabaseOperationException("Error updating client usage", original_error=e)

    async def reset_usage(self, db: AsyncSession, client: Client, now: datetime) -> Client:
        """
        Zero both counters of one client and stamp both reset times.
        """
        return await self.update(db, db_obj=client, obj_in={
            "daily_usage": 0,
            "monthly_usage": 0,
            "last_reset": now,
            "last_monthly_reset": now,
        })

    async def reset_daily_usage(self, db: AsyncSession, window_start: datetime, now: datetime) -> int:
        """
        Zero the daily counter of every client not reset since ``window_start``.

        Returns:
            Number of clients reset
        """
        stmt = (
            update(Client)
            .where(
                Client.deleted_at.is_(None),
                or_(Client.last_reset.is_(None), Client.last_reset < window_start),
            )
            .values(daily_usage=0, last_reset=now)
            .execution_options(synchronize_session=False)
        )
        return await self._bulk_update(db, stmt, "daily")

    async def reset_monthly_usage(self, db: AsyncSession, window_start: datetime, now: datetime) -> int:
        """
        Zero both counters of every client whose monthly counter was not
        reset since ``window_start``. A month boundary is also a day
        boundary, so the daily counter goes too.

        Returns:
            Number of clients reset
        """
        stmt = (
            update(Client)
            .where(
                Client.deleted_at.is_(None),
                or_(Client.last_monthly_reset.is_(None), Client.last_monthly_reset < window_start),
            )
            .values(daily_usage=0, monthly_usage=0, last_reset=now, last_monthly_reset=now)
            .execution_options(synchronize_session=False)
        )
        return await self._bulk_update(db, stmt, "monthly")

    async def _bulk_update(self, db: AsyncSession, stmt, label: str) -> int:
        try:
            result = await db.execute(stmt)
            await db.commit()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            await db.rollback()
            self.logger.error(f"Error running {label} usage reset: {str(e)}")
            raise DatabaseOperationException(f"Error running {label} usage reset", original_error=e)

    async def soft_delete(self, db: AsyncSession, client: Client, now: datetime) -> Client:
        return await self.update(db, db_obj=client, obj_in={"deleted_at": now, "is_active": False})

    def to_domain(self, db_model: Client) -> DomainClient:
        """
        Convert database model to domain model.
        """
        return DomainClient(
            id=db_model.id,
            name=db_model.name,
            email=db_model.email,
            api_key=db_model.api_key,
            is_active=db_model.is_active,
            rate_limit=db_model.rate_limit,
            daily_limit=db_model.daily_limit,
            monthly_limit=db_model.monthly_limit,
            daily_usage=db_model.daily_usage,
            monthly_usage=db_model.monthly_usage,
            last_reset=db_model.last_reset,
            last_monthly_reset=db_model.last_monthly_reset,
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )


# Public instance to be used by use cases
client_repository = AsyncClientCRUD(Client)
