# app/adapters/outbound/sms/delivery_client.py (async version)

"""
Adapter for the upstream SMS provider.

Translates a batch of messages into the provider's ``SendSms`` JSON
request, performs one HTTP call and maps the reply back to one outcome
per message.
"""

import json
import logging
from typing import Any, List, Optional, Sequence

import httpx

from app.application.ports.outbound import IDeliveryClient
from app.domain.exceptions import TransportException
from app.domain.models.sms_domain_model import (
    DEFAULT_PRIORITY,
    PROVIDER_FAILURE,
    DeliveryOutcome,
    OutboundMessage,
)

# Configure logger
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class DeliveryClient(IDeliveryClient):
    """
    JSON-over-HTTPS client for the SMS provider.

    Args:
        api_url: Provider endpoint (sandbox or live)
        username: Provider account username
        password: Provider account password
        timeout: Bound on the whole call, in seconds
        http_client: Optional shared ``httpx.AsyncClient``; one is created
            per call when omitted
    """

    def __init__(
            self,
            api_url: str,
            username: str,
            password: str,
            timeout: float = DEFAULT_TIMEOUT_SECONDS,
            http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url
        self.username = username
        self.password = password
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings) -> "DeliveryClient":
        return cls(
            api_url=settings.sms_api_url,
            username=settings.SMS_USERNAME,
            password=settings.SMS_PASSWORD,
            timeout=settings.SMS_TIMEOUT_SECONDS,
        )

    def build_payload(self, messages: Sequence[OutboundMessage], default_sender_id: str) -> dict:
        return {
            "method": "SendSms",
            "userdata": {
                "username": self.username,
                "password": self.password,
            },
            "msgdata": [
                {
                    "number": msg.number,
                    "message": msg.message,
                    "senderid": msg.sender_id or default_sender_id,
                    "priority": msg.priority or DEFAULT_PRIORITY,
                }
                for msg in messages
            ],
        }

    async def deliver(self, messages: Sequence[OutboundMessage], default_sender_id: str) -> List[DeliveryOutcome]:
        """
        Send every message in a single provider request.

        Returns:
            Exactly one outcome per message, in input order

        Raises:
            TransportException: On connection errors and timeouts
        """
        payload = self.build_payload(messages, default_sender_id)

        try:
            response = await self._post(payload)
        except httpx.HTTPError as e:
            logger.error(f"SMS provider request failed: {type(e).__name__}: {e}")
            raise TransportException(
                "Failed to send SMS",
                f"SMS provider request failed: {type(e).__name__}",
            )

        if response.is_error:
            logger.warning(f"SMS provider answered HTTP {response.status_code}")

        outcomes = self.parse_response(response.text)
        return self.align_outcomes(outcomes, len(messages))

    async def _post(self, payload: dict) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if self._http_client is not None:
            return await self._http_client.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.api_url, json=payload, headers=headers)

    @staticmethod
    def parse_response(body: str) -> List[DeliveryOutcome]:
        """
        Decode the provider body into outcomes.

        An object gives one aggregate outcome; an array gives per-message
        outcomes. Anything else becomes a single failure carrying the raw
        body as its message.
        """
        try:
            decoded: Any = json.loads(body)
        except ValueError:
            logger.warning(f"Unexpected response format: {body}")
            return [DeliveryOutcome(status=PROVIDER_FAILURE, message=body)]

        items = decoded if isinstance(decoded, list) else [decoded]
        outcomes = []
        for item in items:
            if not isinstance(item, dict) or "Status" not in item:
                logger.warning(f"Unexpected response format: {body}")
                return [DeliveryOutcome(status=PROVIDER_FAILURE, message=body)]
            outcomes.append(DeliveryOutcome(
                status=str(item.get("Status") or ""),
                message=str(item.get("Message") or ""),
            ))

        if not outcomes:
            logger.warning(f"Empty response from SMS provider: {body}")
            return [DeliveryOutcome(status=PROVIDER_FAILURE, message=body)]

        for outcome in outcomes:
            logger.info(f"SMS Provider Response: Status={outcome.status}, Message={outcome.message}")
        return outcomes

    @staticmethod
    def align_outcomes(outcomes: List[DeliveryOutcome], count: int) -> List[DeliveryOutcome]:
        """
        Match outcomes positionally to ``count`` messages, falling back to
        the first outcome for any index the provider did not report.
        """
        return [outcomes[i] if i < len(outcomes) else outcomes[0] for i in range(count)]
