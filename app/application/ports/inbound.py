# app/application/ports/inbound.py

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.application.dtos.client_dto import ClientCreate, ClientUpdate
from app.application.dtos.sms_dto import SmsRequest
from app.domain.models.client_domain_model import AuthenticatedClient
from app.domain.models.sms_domain_model import RequestMetadata, SendResult, BulkSendResult


class IAuthUseCase(ABC):
    """Interface for authentication use cases."""

    @abstractmethod
    def authenticate(self, api_key: Optional[str], api_secret: Optional[str],
                     enforce_quota: bool = True) -> AuthenticatedClient:
        """Validate API credentials, status and quota gates."""
        pass

    @abstractmethod
    def basic_authenticate(self, username: str, password: str) -> None:
        """Validate the administrative credential pair."""
        pass


class ISmsUseCase(ABC):
    """Interface for SMS sending use cases."""

    @abstractmethod
    def send_single(self, auth: AuthenticatedClient, request: SmsRequest,
                    metadata: RequestMetadata) -> SendResult:
        """Send one message."""
        pass

    @abstractmethod
    def send_bulk(self, auth: AuthenticatedClient, requests: List[SmsRequest],
                  metadata: RequestMetadata) -> BulkSendResult:
        """Send a batch of messages in one provider call."""
        pass


class IClientUseCase(ABC):
    """Interface for client administration use cases."""

    @abstractmethod
    def create_client(self, data: ClientCreate) -> Dict[str, Any]:
        """Create a client and return its one-time credentials."""
        pass

    @abstractmethod
    def list_clients(self, is_active: Optional[bool] = None) -> List[Any]:
        """List clients with secrets redacted."""
        pass

    @abstractmethod
    def update_client(self, id: Any, data: ClientUpdate) -> Any:
        """Partially update a client."""
        pass

    @abstractmethod
    def reset_usage(self, id: Any) -> Any:
        """Zero a client's usage counters."""
        pass

    @abstractmethod
    def delete_client(self, id: Any) -> None:
        """Soft-delete a client."""
        pass
