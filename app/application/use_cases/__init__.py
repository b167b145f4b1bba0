# app/application/use_cases/__init__.py (async version)

"""
Application service module.

This package contains the application services that implement the
business logic of the gateway, organized by functional area.
"""

from app.application.use_cases.auth_use_cases import AsyncAuthService
from app.application.use_cases.client_use_cases import AsyncClientService
from app.application.use_cases.sms_use_cases import AsyncSmsService
from app.application.use_cases.usage_reset_use_cases import UsageResetScheduler

__all__ = [
    "AsyncAuthService",
    "AsyncClientService",
    "AsyncSmsService",
    "UsageResetScheduler",
]
