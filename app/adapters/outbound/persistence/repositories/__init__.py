# app/adapters/outbound/persistence/repositories/__init__.py (async version)

"""
Repository module.

Exports the repository classes and their shared instances.
"""

from app.adapters.outbound.persistence.repositories.base_repository import AsyncAppendOnlyBase, AsyncCRUDBase
from app.adapters.outbound.persistence.repositories.client_repository import AsyncClientCRUD, client_repository
from app.adapters.outbound.persistence.repositories.sms_log_repository import AsyncSmsLogCRUD, sms_log_repository

__all__ = [
    # Classes
    "AsyncAppendOnlyBase",
    "AsyncCRUDBase",
    "AsyncClientCRUD",
    "AsyncSmsLogCRUD",

    # Instances
    "client_repository",
    "sms_log_repository",
]
