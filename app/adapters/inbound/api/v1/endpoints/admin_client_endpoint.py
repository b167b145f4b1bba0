# app/adapters/inbound/api/v1/endpoints/admin_client_endpoint.py (async version)

"""
Administrative endpoints for API clients.

All routes require HTTP basic authentication with the configured admin
credential pair.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Path, Query, status

from app.adapters.inbound.api.deps import get_client_service, require_admin
from app.application.dtos.base_dto import ApiResponse
from app.application.dtos.client_dto import (
    ClientCreate,
    ClientCreateResponse,
    ClientOutput,
    ClientUpdate,
)
from app.application.use_cases.client_use_cases import AsyncClientService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[ClientCreateResponse],
    response_model_exclude_none=True,
    summary="Create client",
    description="Registers a client and returns its API key and secret. The secret is never shown again.",
)
async def create_client(
        payload: ClientCreate,
        client_service: AsyncClientService = Depends(get_client_service),
):
    created = await client_service.create_client(payload)
    return ApiResponse(success=True, message="Client created successfully", data=created)


@router.get(
    "",
    response_model=ApiResponse[List[ClientOutput]],
    response_model_exclude_none=True,
    summary="List clients",
)
async def list_clients(
        is_active: Optional[bool] = Query(None, description="Filter by active status"),
        client_service: AsyncClientService = Depends(get_client_service),
):
    clients = await client_service.list_clients(is_active=is_active)
    return ApiResponse(
        success=True,
        message="Clients retrieved successfully",
        data=[ClientOutput.model_validate(c) for c in clients],
    )


@router.put(
    "/{client_id}",
    response_model=ApiResponse[ClientOutput],
    response_model_exclude_none=True,
    summary="Update client",
    description="Changes only the fields present in the request body.",
)
async def update_client(
        payload: ClientUpdate,
        client_id: UUID = Path(..., description="Client ID"),
        client_service: AsyncClientService = Depends(get_client_service),
):
    client = await client_service.update_client(client_id, payload)
    return ApiResponse(
        success=True,
        message="Client updated successfully",
        data=ClientOutput.model_validate(client),
    )


@router.post(
    "/{client_id}/reset",
    response_model=ApiResponse[ClientOutput],
    response_model_exclude_none=True,
    summary="Reset client usage",
)
async def reset_client_usage(
        client_id: UUID = Path(..., description="Client ID"),
        client_service: AsyncClientService = Depends(get_client_service),
):
    client = await client_service.reset_usage(client_id)
    return ApiResponse(
        success=True,
        message="Client usage reset successfully",
        data=ClientOutput.model_validate(client),
    )


@router.delete(
    "/{client_id}",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    summary="Delete client",
    description="Soft-deletes the client. Its send logs are kept.",
)
async def delete_client(
        client_id: UUID = Path(..., description="Client ID"),
        client_service: AsyncClientService = Depends(get_client_service),
):
    await client_service.delete_client(client_id)
    return ApiResponse(success=True, message="Client deleted successfully")
