# app/domain/exceptions.py

"""
Domain exceptions for the SMS gateway.

These exceptions are framework-free. Each one carries a caller-facing
``message``, an ``error`` detail and an ``internal_code`` that the exception
middleware maps to an HTTP status code.
"""

from typing import Any, Optional


class DomainException(Exception):
    """Base class for every exception raised by the application core."""

    internal_code: str = "DOMAIN_ERROR"
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class InvalidInputException(DomainException):
    """Malformed payload or invalid phone number."""

    internal_code = "INVALID_INPUT"
    default_message = "Invalid request payload"


class AuthError(DomainException):
    """Base class for authentication and quota gate failures."""

    internal_code = "INVALID_CREDENTIALS"
    default_message = "Authentication failed"


class MissingCredentialsException(AuthError):
    """API key or secret header missing."""

    default_message = "Missing API credentials"

    def __init__(self, message: Optional[str] = None,
                 error: str = "X-API-Key and X-API-Secret headers are required"):
        super().__init__(message, error)


class InvalidCredentialsException(AuthError):
    """Unknown API key or secret mismatch. Both cases share this exact shape."""

    default_message = "Invalid API credentials"

    def __init__(self, message: Optional[str] = None,
                 error: str = "The supplied API key or secret is not valid"):
        super().__init__(message, error)


class InactiveClientException(AuthError):
    internal_code = "CLIENT_INACTIVE"
    default_message = "API client is inactive"

    def __init__(self, message: Optional[str] = None,
                 error: str = "Your API access has been suspended"):
        super().__init__(message, error)


class QuotaExceededException(AuthError):
    internal_code = "QUOTA_EXCEEDED"
    default_message = "Quota exceeded"


class DailyLimitExceededException(QuotaExceededException):
    default_message = "Daily limit exceeded"

    def __init__(self, message: Optional[str] = None,
                 error: str = "You have reached your daily SMS limit"):
        super().__init__(message, error)


class MonthlyLimitExceededException(QuotaExceededException):
    default_message = "Monthly limit exceeded"

    def __init__(self, message: Optional[str] = None,
                 error: str = "You have reached your monthly SMS limit"):
        super().__init__(message, error)


class BulkQuotaExceededException(QuotaExceededException):
    default_message = "Bulk request would exceed daily limit"

    def __init__(self, message: Optional[str] = None,
                 error: str = "Requested messages exceed available daily quota"):
        super().__init__(message, error)


class RateLimitExceededException(QuotaExceededException):
    default_message = "Rate limit exceeded"

    def __init__(self, message: Optional[str] = None,
                 error: str = "Too many requests per second for this client"):
        super().__init__(message, error)


class TransportException(DomainException):
    """The SMS provider could not be reached or did not answer in time."""

    internal_code = "TRANSPORT_ERROR"
    default_message = "Failed to reach SMS provider"


class ResourceNotFoundException(DomainException):
    internal_code = "RESOURCE_NOT_FOUND"
    default_message = "Resource not found"

    def __init__(self, message: Optional[str] = None, resource_id: Any = None):
        resource_info = f"ID {resource_id} not found" if resource_id is not None else None
        super().__init__(message, resource_info)


class ResourceAlreadyExistsException(DomainException):
    internal_code = "RESOURCE_ALREADY_EXISTS"
    default_message = "Resource already exists"


class DatabaseOperationException(DomainException):
    """Error while executing a database operation."""

    internal_code = "DATABASE_OPERATION_ERROR"
    default_message = "Error executing database operation"

    def __init__(self, message: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message, type(original_error).__name__ if original_error else None)
        self.original_error = original_error
