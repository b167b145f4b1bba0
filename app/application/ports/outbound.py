# app/application/ports/outbound.py

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from app.domain.models.sms_domain_model import OutboundMessage, DeliveryOutcome


class IClientRepository(ABC):
    """Client repository interface."""

    @abstractmethod
    def get_active_by_id(self, db, id: Any):
        """Get a non-deleted client by ID."""
        pass

    @abstractmethod
    def get_by_api_key(self, db, api_key: str):
        """Get a non-deleted client by API key."""
        pass

    @abstractmethod
    def increment_usage(self, db, client_id: Any, amount: int) -> None:
        """Atomically add to both usage counters."""
        pass

    @abstractmethod
    def reset_usage(self, db, client, now: datetime):
        """Zero both counters of one client."""
        pass

    @abstractmethod
    def reset_daily_usage(self, db, window_start: datetime, now: datetime) -> int:
        """Zero daily counters not reset since window_start."""
        pass

    @abstractmethod
    def reset_monthly_usage(self, db, window_start: datetime, now: datetime) -> int:
        """Zero monthly counters not reset since window_start."""
        pass

    @abstractmethod
    def to_domain(self, db_model):
        """Convert a stored client to the domain model."""
        pass


class ISmsLogRepository(ABC):
    """Append-only send log interface."""

    @abstractmethod
    def create(self, db, *, obj_in: Dict[str, Any]):
        """Insert one entry."""
        pass

    @abstractmethod
    def create_many(self, db, entries: List[Dict[str, Any]]):
        """Insert several entries in one transaction."""
        pass

    @abstractmethod
    def list_for_client(self, db, client_id: Any, *, limit: int = 50, offset: int = 0,
                        status: Optional[str] = None):
        """List a client's entries newest first."""
        pass


class IDeliveryClient(ABC):
    """SMS provider interface."""

    @abstractmethod
    async def deliver(self, messages: Sequence[OutboundMessage], default_sender_id: str) -> List[DeliveryOutcome]:
        """
        Send all messages in one provider call.

        Returns exactly one outcome per message, or raises TransportException.
        """
        pass
