# app/application/use_cases/sms_use_cases.py (async version)

"""
Service for sending SMS.

Orchestrates single and bulk sends for an authenticated client: phone
validation, the provider call, one audit log entry per message and the
usage counter update.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.outbound.persistence.repositories.client_repository import client_repository
from app.adapters.outbound.persistence.repositories.sms_log_repository import sms_log_repository
from app.application.dtos.sms_dto import SmsRequest
from app.application.ports.inbound import ISmsUseCase
from app.application.ports.outbound import IClientRepository, ISmsLogRepository, IDeliveryClient
from app.domain.exceptions import InvalidInputException, TransportException
from app.domain.models.client_domain_model import AuthenticatedClient
from app.domain.models.sms_domain_model import (
    DEFAULT_PRIORITY,
    TRANSPORT_ERROR_STATUS,
    BulkSendResult,
    DeliveryOutcome,
    DeliveryStatus,
    OutboundMessage,
    RequestMetadata,
    SendResult,
)
from app.domain.services.quota_service import QuotaService
from app.shared.utils.phone import DEFAULT_COUNTRY_CODE, is_valid_phone, normalize_phone

logger = logging.getLogger(__name__)


class AsyncSmsService(ISmsUseCase):
    """
    Send orchestrator.

    Every message ends in one of two terminal states, ``sent`` or
    ``failed``; nothing is retried.

    Args:
        db_session: Active SQLAlchemy session
        delivery_client: Provider adapter
        default_sender_id: Gateway-wide sender id; the client name is used when empty
        country_code: Country code applied to local numbers
        clients: Client repository
        logs: Send log repository
    """

    def __init__(
            self,
            db_session: AsyncSession,
            delivery_client: IDeliveryClient,
            default_sender_id: str = "",
            country_code: str = DEFAULT_COUNTRY_CODE,
            clients: IClientRepository = client_repository,
            logs: ISmsLogRepository = sms_log_repository,
    ):
        self.db = db_session
        self.delivery_client = delivery_client
        self.default_sender_id = default_sender_id
        self.country_code = country_code
        self.clients = clients
        self.logs = logs

    def prepare_messages(self, requests: Sequence[SmsRequest]) -> List[OutboundMessage]:
        """
        Validate every recipient and normalize it.

        Raises:
            InvalidInputException: On the first invalid number; nothing is sent
        """
        many = len(requests) > 1
        prepared = []
        for req in requests:
            if not is_valid_phone(req.number, self.country_code):
                raise InvalidInputException(
                    "Invalid phone number in messages" if many else "Invalid phone number",
                    f"Phone number {req.number} is invalid",
                )
            prepared.append(OutboundMessage(
                number=normalize_phone(req.number, self.country_code),
                message=req.message,
                sender_id=req.senderid or "",
                priority=req.priority or "",
            ))
        return prepared

    def _sender_for(self, auth: AuthenticatedClient) -> str:
        return self.default_sender_id or auth.client.name

    def _log_entry(
            self,
            auth: AuthenticatedClient,
            msg: OutboundMessage,
            sender_id: str,
            status: DeliveryStatus,
            provider_status: str,
            provider_message: str,
            error: Optional[str],
            metadata: RequestMetadata,
    ) -> Dict[str, Any]:
        return {
            "client_id": auth.id,
            "recipient": msg.number,
            "message": msg.message,
            "sender_id": msg.sender_id or sender_id,
            "priority": msg.priority or DEFAULT_PRIORITY,
            "status": status.value,
            "provider_status": provider_status,
            "provider_message": provider_message,
            "error": error,
            "ip_address": metadata.ip_address,
            "user_agent": metadata.user_agent,
        }

    def _classified_entry(
            self,
            auth: AuthenticatedClient,
            msg: OutboundMessage,
            sender_id: str,
            outcome: DeliveryOutcome,
            metadata: RequestMetadata,
    ) -> Dict[str, Any]:
        status = QuotaService.classify(outcome)
        error = None if status == DeliveryStatus.SENT else outcome.message
        return self._log_entry(auth, msg, sender_id, status, outcome.status, outcome.message, error, metadata)

    @staticmethod
    def _to_result(entry) -> SendResult:
        return SendResult(
            log_id=entry.id,
            recipient=entry.recipient,
            status=DeliveryStatus(entry.status),
            provider_status=entry.provider_status or "",
            provider_message=entry.provider_message or "",
            error=entry.error,
        )

    async def send_single(
            self,
            auth: AuthenticatedClient,
            request: SmsRequest,
            metadata: RequestMetadata,
    ) -> SendResult:
        """
        Send one message.

        A transport failure is logged as a failed entry and re-raised. A
        provider rejection is returned as a failed result. Counters move
        only when the message is sent.

        Raises:
            InvalidInputException: Invalid phone number
            TransportException: Provider unreachable or timed out
        """
        msg = self.prepare_messages([request])[0]
        sender_id = self._sender_for(auth)

        try:
            outcomes = await self.delivery_client.deliver([msg], sender_id)
        except TransportException as e:
            await self.logs.create(self.db, obj_in=self._log_entry(
                auth, msg, sender_id, DeliveryStatus.FAILED,
                TRANSPORT_ERROR_STATUS, "", e.error or e.message, metadata,
            ))
            logger.error(f"SMS to {msg.number} for client {auth.id} failed: {e.error}")
            raise

        entry = await self.logs.create(
            self.db, obj_in=self._classified_entry(auth, msg, sender_id, outcomes[0], metadata)
        )
        result = self._to_result(entry)

        if result.sent:
            await self.clients.increment_usage(self.db, auth.id, 1)
            logger.info(f"SMS sent to {result.recipient} for client {auth.id}")
        else:
            logger.info(
                f"SMS to {result.recipient} for client {auth.id} rejected by provider: "
                f"{result.provider_status} {result.provider_message}"
            )
        return result

    async def send_bulk(
            self,
            auth: AuthenticatedClient,
            requests: List[SmsRequest],
            metadata: RequestMetadata,
    ) -> BulkSendResult:
        """
        Send a batch in one provider call.

        The whole batch is rejected up front on an invalid number or when
        it would exceed the remaining daily quota. A transport failure
        rejects the batch without logging anything. Otherwise each message
        gets its own log entry and the counters grow by the number sent.

        Raises:
            InvalidInputException: Any invalid phone number
            BulkQuotaExceededException: Batch larger than the remaining daily quota
            TransportException: Provider unreachable or timed out
        """
        messages = self.prepare_messages(requests)
        QuotaService.check_bulk_quota(auth.client, len(messages))

        sender_id = self._sender_for(auth)
        try:
            outcomes = await self.delivery_client.deliver(messages, sender_id)
        except TransportException as e:
            logger.error(f"Bulk SMS of {len(messages)} for client {auth.id} failed: {e.error}")
            raise

        entries = []
        for i, msg in enumerate(messages):
            # Fewer outcomes than messages: reuse the first one
            outcome = outcomes[i] if i < len(outcomes) else outcomes[0]
            entries.append(self._classified_entry(auth, msg, sender_id, outcome, metadata))

        created = await self.logs.create_many(self.db, entries)
        results = [self._to_result(entry) for entry in created]

        successful = sum(1 for r in results if r.sent)
        await self.clients.increment_usage(self.db, auth.id, successful)

        logger.info(
            f"Bulk SMS for client {auth.id}: total={len(results)} "
            f"successful={successful} failed={len(results) - successful}"
        )
        return BulkSendResult(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )

    async def list_logs(
            self,
            auth: AuthenticatedClient,
            limit: int = 50,
            offset: int = 0,
            status: Optional[str] = None,
    ):
        """Return the caller's own log entries, newest first."""
        return await self.logs.list_for_client(self.db, auth.id, limit=limit, offset=offset, status=status)
