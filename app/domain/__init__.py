# app/domain/__init__.py

"""
Core domain components of the gateway.

Exports the domain exceptions for convenient importing.
"""

from app.domain.exceptions import (
    DomainException,
    InvalidInputException,
    AuthError,
    MissingCredentialsException,
    InvalidCredentialsException,
    InactiveClientException,
    QuotaExceededException,
    DailyLimitExceededException,
    MonthlyLimitExceededException,
    BulkQuotaExceededException,
    RateLimitExceededException,
    TransportException,
    ResourceNotFoundException,
    ResourceAlreadyExistsException,
    DatabaseOperationException,
)
