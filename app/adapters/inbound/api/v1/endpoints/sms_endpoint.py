# app/adapters/inbound/api/v1/endpoints/sms_endpoint.py (async version)

"""
Endpoints for sending SMS and reading send history.

Every route here authenticates with the X-API-Key and X-API-Secret
headers. The send routes also apply the quota gates.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from fastapi_pagination import LimitOffsetParams

from app.adapters.inbound.api.deps import (
    get_reading_client,
    get_request_metadata,
    get_sending_client,
    get_sms_service,
)
from app.application.dtos.base_dto import ApiResponse
from app.application.dtos.sms_dto import (
    BulkResultItem,
    BulkSendData,
    BulkSmsRequest,
    ClientStats,
    ProviderResponse,
    SmsLogOutput,
    SmsRequest,
    SmsSendData,
)
from app.application.use_cases.sms_use_cases import AsyncSmsService
from app.domain.models.client_domain_model import AuthenticatedClient
from app.domain.models.sms_domain_model import DeliveryStatus, RequestMetadata
from app.shared.utils.pagination import limit_offset_params

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/send",
    response_model=ApiResponse[SmsSendData],
    response_model_exclude_none=True,
    summary="Send SMS",
    description="Sends one message. A provider rejection is returned with success=false.",
)
async def send_sms(
        payload: SmsRequest,
        auth: AuthenticatedClient = Depends(get_sending_client),
        metadata: RequestMetadata = Depends(get_request_metadata),
        sms_service: AsyncSmsService = Depends(get_sms_service),
):
    result = await sms_service.send_single(auth, payload, metadata)

    data = SmsSendData(
        log_id=result.log_id,
        recipient=result.recipient,
        status=result.status.value,
        provider_response=ProviderResponse(
            status=result.provider_status,
            message=result.provider_message,
        ),
    )
    if not result.sent:
        return ApiResponse(success=False, message="SMS failed to send", error=result.error, data=data)
    return ApiResponse(success=True, message="SMS sent successfully", data=data)


@router.post(
    "/send/bulk",
    response_model=ApiResponse[BulkSendData],
    response_model_exclude_none=True,
    summary="Send bulk SMS",
    description="Sends a batch of messages in a single provider call.",
)
async def send_bulk_sms(
        payload: BulkSmsRequest,
        auth: AuthenticatedClient = Depends(get_sending_client),
        metadata: RequestMetadata = Depends(get_request_metadata),
        sms_service: AsyncSmsService = Depends(get_sms_service),
):
    result = await sms_service.send_bulk(auth, payload.messages, metadata)
    return ApiResponse(
        success=True,
        message="Bulk SMS processing completed",
        data=BulkSendData(
            total=result.total,
            successful=result.successful,
            failed=result.failed,
            results=[
                BulkResultItem(log_id=r.log_id, recipient=r.recipient, status=r.status.value)
                for r in result.results
            ],
        ),
    )


@router.get(
    "/logs",
    response_model=ApiResponse[List[SmsLogOutput]],
    response_model_exclude_none=True,
    summary="List send logs",
    description="Returns the caller's own log entries, newest first.",
)
async def list_sms_logs(
        status: Optional[DeliveryStatus] = Query(None, description="Filter by delivery status"),
        params: LimitOffsetParams = Depends(limit_offset_params),
        auth: AuthenticatedClient = Depends(get_reading_client),
        sms_service: AsyncSmsService = Depends(get_sms_service),
):
    logs = await sms_service.list_logs(
        auth,
        limit=params.limit,
        offset=params.offset,
        status=status.value if status else None,
    )
    return ApiResponse(
        success=True,
        message="SMS logs retrieved successfully",
        data=[SmsLogOutput.model_validate(log) for log in logs],
    )


@router.get(
    "/stats",
    response_model=ApiResponse[ClientStats],
    response_model_exclude_none=True,
    summary="Usage statistics",
    description="Returns the caller's current counters and limits.",
)
async def get_stats(auth: AuthenticatedClient = Depends(get_reading_client)):
    client = auth.client
    return ApiResponse(
        success=True,
        message="Usage statistics retrieved successfully",
        data=ClientStats(
            client_id=client.id,
            daily_usage=client.daily_usage,
            monthly_usage=client.monthly_usage,
            daily_limit=client.daily_limit,
            monthly_limit=client.monthly_limit,
            is_active=client.is_active,
        ),
    )
