# app/adapters/outbound/persistence/repositories/sms_log_repository.py (async version)

"""
Repository for the append-only SMS send log.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.adapters.outbound.persistence.repositories.base_repository import AsyncAppendOnlyBase
from app.adapters.outbound.persistence.models import SmsLog
from app.application.ports.outbound import ISmsLogRepository
from app.domain.exceptions import DatabaseOperationException


class AsyncSmsLogCRUD(AsyncAppendOnlyBase[SmsLog], ISmsLogRepository):
    """
    Log entries are only ever inserted and read, never updated.
    """

    async def create_many(self, db: AsyncSession, entries: List[Dict[str, Any]]) -> List[SmsLog]:
        """
        Insert several entries in one transaction.

        Args:
            db: Async database session
            entries: Column values for each entry, in message order

        Returns:
            Created entries in the same order
        """
        try:
            objs = [SmsLog(**entry) for entry in entries]
            db.add_all(objs)
            await db.commit()
            self.logger.debug(f"{len(objs)} SMS log entries created")
            return objs
        except SQLAlchemyError as e:
            await db.rollback()
            self.logger.error(f"Error creating SMS log entries: {str(e)}")
            raise DatabaseOperationException("Error creating SMS log entries", original_error=e)

    async def list_for_client(
            self,
            db: AsyncSession,
            client_id: Any,
            *,
            limit: int = 50,
            offset: int = 0,
            status: Optional[str] = None,
    ) -> List[SmsLog]:
        """
        List a client's entries newest first, optionally filtered by status.
        """
        try:
            query = select(SmsLog).where(SmsLog.client_id == client_id)
            if status:
                query = query.where(SmsLog.status == status)
            query = query.order_by(SmsLog.created_at.desc()).offset(offset).limit(limit)

            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing SMS logs for client {client_id}: {str(e)}")
            raise DatabaseOperationException("Error retrieving SMS logs", original_error=e)


sms_log_repository = AsyncSmsLogCRUD(SmsLog)
