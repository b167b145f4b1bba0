# app/application/dtos/sms_dto.py

"""
Schemas for SMS send requests and their results.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.shared.utils.input_validation import InputValidator


class SmsRequest(BaseModel):
    """
    One message as sent by the caller. The number is normalized and
    validated by the send use case, not here.
    """
    number: str = Field(..., min_length=1, description="Recipient phone number")
    message: str = Field(..., min_length=1, description="Message body")
    senderid: Optional[str] = Field(None, description="Sender id, defaults to the gateway sender")
    priority: Optional[str] = Field(None, description="Provider priority, defaults to 1")

    @field_validator("message")
    def validate_message(cls, v):
        is_valid, error_msg = InputValidator.validate_message(v)
        if not is_valid:
            raise ValueError(error_msg)
        return v

    @field_validator("senderid")
    def validate_sender_id(cls, v):
        if v is None:
            return v
        v = v.strip()
        is_valid, error_msg = InputValidator.validate_sender_id(v)
        if not is_valid:
            raise ValueError(error_msg)
        return v


class BulkSmsRequest(BaseModel):
    messages: List[SmsRequest] = Field(..., min_length=1, description="Messages to send")


class ProviderResponse(BaseModel):
    status: str
    message: str


class SmsSendData(BaseModel):
    log_id: UUID
    recipient: str
    status: str
    provider_response: Optional[ProviderResponse] = None


class BulkResultItem(BaseModel):
    log_id: UUID
    recipient: str
    status: str


class BulkSendData(BaseModel):
    total: int
    successful: int
    failed: int
    results: List[BulkResultItem]


class SmsLogOutput(BaseModel):
    """
    Stored send log entry as returned to its owner.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    recipient: str
    message: str
    sender_id: Optional[str] = None
    priority: Optional[str] = None
    status: str
    provider_status: Optional[str] = None
    provider_message: Optional[str] = None
    error: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class ClientStats(BaseModel):
    client_id: UUID
    daily_usage: int
    monthly_usage: int
    daily_limit: int
    monthly_limit: int
    is_active: bool
