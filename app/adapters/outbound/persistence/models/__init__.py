# app/adapters/outbound/persistence/models/__init__.py

"""
Data models module.

Exports every SQLAlchemy model so metadata is complete wherever
``Base`` is imported from here.
"""

from app.adapters.outbound.persistence.models.base_model import Base
from app.adapters.outbound.persistence.models.client_model import Client
from app.adapters.outbound.persistence.models.sms_log_model import SmsLog

__all__ = [
    "Base",
    "Client",
    "SmsLog",
]
