# app/adapters/outbound/persistence/models/sms_log_model.py

"""
Append-only audit log of outbound SMS attempts.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.adapters.outbound.persistence.models.base_model import Base


class SmsLog(Base):
    """
    One row per message attempt. Rows are never updated after insert.
    """
    __tablename__ = "sms_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("clients.id"), nullable=False, index=True)

    recipient = Column(String(32), nullable=False)
    message = Column(Text, nullable=False)
    sender_id = Column(String(64), nullable=True)
    priority = Column(String(8), nullable=True)

    status = Column(String(16), nullable=False, index=True)
    provider_status = Column(String(64), nullable=True)
    provider_message = Column(Text, nullable=True)
    error = Column(Text, nullable=True)

    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)

    client = relationship("Client", back_populates="logs", lazy="noload")

    def __repr__(self) -> str:
        return f"<SmsLog(recipient={self.recipient}, status={self.status})>"
