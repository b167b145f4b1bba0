# app/application/dtos/base_dto.py

"""
Base classes for the application DTOs.

Defines the response envelope shared by every JSON endpoint.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Response envelope: ``{success, message, data?, error?}``.
    """
    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human readable summary")
    data: Optional[DataT] = Field(None, description="Operation payload")
    error: Optional[str] = Field(None, description="Error detail when success is false")
