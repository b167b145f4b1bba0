# app/domain/models/sms_domain_model.py

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import UUID

DEFAULT_PRIORITY = "1"
PROVIDER_SUCCESS = "success"
PROVIDER_FAILURE = "Failed"
TRANSPORT_ERROR_STATUS = "error"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class OutboundMessage:
    """A validated message with its recipient already normalized."""
    number: str
    message: str
    sender_id: str = ""
    priority: str = ""


@dataclass(frozen=True)
class DeliveryOutcome:
    """Provider status/message pair for one message."""
    status: str
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status.lower() == PROVIDER_SUCCESS


@dataclass(frozen=True)
class RequestMetadata:
    ip_address: str = ""
    user_agent: str = ""


@dataclass
class SendResult:
    log_id: UUID
    recipient: str
    status: DeliveryStatus
    provider_status: str = ""
    provider_message: str = ""
    error: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.status == DeliveryStatus.SENT


@dataclass
class BulkSendResult:
    total: int
    successful: int
    failed: int
    results: List[SendResult] = field(default_factory=list)
