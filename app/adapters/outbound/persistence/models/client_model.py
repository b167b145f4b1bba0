# app/adapters/outbound/persistence/models/client_model.py

"""
Client model for API access and quota accounting.

A client is an external application allowed to send SMS through the
gateway with its own API key/secret pair and message quotas.
"""

import uuid

from sqlalchemy import Column, String, Boolean, Integer, DateTime, Uuid, func
from sqlalchemy.orm import relationship

from app.adapters.outbound.persistence.models.base_model import Base

DEFAULT_RATE_LIMIT = 100
DEFAULT_DAILY_LIMIT = 10000
DEFAULT_MONTHLY_LIMIT = 300000


class Client(Base):
    """
    Registered caller of the gateway.

    Attributes:
        id: Unique identifier
        name: Display name, also the fallback sender id
        email: Unique contact email
        api_key: Public API key
        api_secret_hash: bcrypt hash of the API secret
        is_active: Whether the client may send
        rate_limit: Requests per second
        daily_limit / monthly_limit: Message quotas
        daily_usage / monthly_usage: Messages sent in the current window
        last_reset: Last time any counter was zeroed
        last_monthly_reset: Last time the monthly counter was zeroed
        deleted_at: Soft-delete timestamp
    """
    __tablename__ = "clients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    api_key = Column(String(64), unique=True, nullable=False, index=True)
    api_secret_hash = Column(String(255), nullable=False)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    rate_limit = Column(Integer, default=DEFAULT_RATE_LIMIT, nullable=False)
    daily_limit = Column(Integer, default=DEFAULT_DAILY_LIMIT, nullable=False)
    monthly_limit = Column(Integer, default=DEFAULT_MONTHLY_LIMIT, nullable=False)

    daily_usage = Column(Integer, default=0, nullable=False)
    monthly_usage = Column(Integer, default=0, nullable=False)
    last_reset = Column(DateTime, nullable=True)
    last_monthly_reset = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True, index=True)

    logs = relationship("SmsLog", back_populates="client", lazy="noload")

    def __repr__(self) -> str:
        return f"<Client(name={self.name}, active={self.is_active})>"
