# app/domain/models/client_domain_model.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class Client:
    """Domain model for an API client and its quota state."""
    id: UUID
    name: str
    email: str
    api_key: str
    is_active: bool
    rate_limit: int
    daily_limit: int
    monthly_limit: int
    daily_usage: int = 0
    monthly_usage: int = 0
    last_reset: Optional[datetime] = None
    last_monthly_reset: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthenticatedClient:
    """
    A client that has passed the authenticator.

    Only the authenticator builds these, so receiving one means the
    credential, status and quota gates already ran for this request.
    """
    client: Client

    @property
    def id(self) -> UUID:
        return self.client.id
