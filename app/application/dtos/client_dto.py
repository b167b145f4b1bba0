# app/application/dtos/client_dto.py

"""
Schemas for client (partner application) administration.

Secrets never appear in any output schema except the one-time
creation response.
"""

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.shared.utils.input_validation import InputValidator


def _check_name(v):
    if v is None:
        return v
    is_valid, error_msg = InputValidator.validate_name(v)
    if not is_valid:
        raise ValueError(error_msg)
    return InputValidator.sanitize_name(v)


class ClientCreate(BaseModel):
    """
    Data required to register a client. Zero or missing limits fall back
    to the defaults.
    """
    name: Annotated[str, AfterValidator(_check_name)] = Field(..., description="Display name of the client")
    email: EmailStr = Field(..., description="Unique contact email")
    rate_limit: Optional[int] = Field(None, ge=0, description="Requests per second")
    daily_limit: Optional[int] = Field(None, ge=0, description="Messages per day")
    monthly_limit: Optional[int] = Field(None, ge=0, description="Messages per month")

    @field_validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()


class ClientUpdate(BaseModel):
    """
    Partial update: only the fields present in the request are changed.
    """
    name: Annotated[Optional[str], AfterValidator(_check_name)] = None
    is_active: Optional[bool] = None
    rate_limit: Optional[int] = Field(None, ge=1)
    daily_limit: Optional[int] = Field(None, ge=0)
    monthly_limit: Optional[int] = Field(None, ge=0)


class ClientOutput(BaseModel):
    """
    Client data returned by the admin API, with credentials redacted.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    api_key: str
    is_active: bool
    rate_limit: int
    daily_limit: int
    monthly_limit: int
    daily_usage: int
    monthly_usage: int
    last_reset: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClientCreateResponse(BaseModel):
    """
    Credentials issued for a new client. The secret is shown only here.
    """
    client_id: UUID = Field(..., description="Identifier of the client")
    name: str
    email: str
    api_key: str = Field(..., description="Public API key")
    api_secret: str = Field(..., description="API secret, never shown again")
    rate_limit: int
    daily_limit: int
    monthly_limit: int
    warning: str = "Save these credentials securely. The API secret will not be shown again."
