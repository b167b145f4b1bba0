# app/domain/models/__init__.py

from app.domain.models.client_domain_model import Client, AuthenticatedClient
from app.domain.models.sms_domain_model import (
    DeliveryStatus,
    OutboundMessage,
    DeliveryOutcome,
    RequestMetadata,
    SendResult,
    BulkSendResult,
)

__all__ = [
    "Client",
    "AuthenticatedClient",
    "DeliveryStatus",
    "OutboundMessage",
    "DeliveryOutcome",
    "RequestMetadata",
    "SendResult",
    "BulkSendResult",
]
