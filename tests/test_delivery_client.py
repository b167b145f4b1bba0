import json

import httpx
import pytest

from app.adapters.outbound.sms.delivery_client import DeliveryClient
from app.domain.exceptions import TransportException
from app.domain.models.sms_domain_model import DeliveryOutcome, OutboundMessage


def _messages(n=1, **kwargs):
    return [OutboundMessage(number=f"+25670123456{i}", message=f"hello {i}", **kwargs) for i in range(n)]


async def test_payload_shape(provider, delivery_client):
    provider.mock(return_value=httpx.Response(200, json={"Status": "OK", "Message": "queued"}))

    await delivery_client.deliver(
        [OutboundMessage(number="+256701234567", message="hi", sender_id="SHOP", priority="0"),
         OutboundMessage(number="+256701234568", message="there")],
        default_sender_id="Acme",
    )

    assert provider.call_count == 1
    sent = json.loads(provider.calls.last.request.content)
    assert sent == {
        "method": "SendSms",
        "userdata": {"username": "gateway-user", "password": "gateway-pass"},
        "msgdata": [
            {"number": "+256701234567", "message": "hi", "senderid": "SHOP", "priority": "0"},
            {"number": "+256701234568", "message": "there", "senderid": "Acme", "priority": "1"},
        ],
    }
    assert provider.calls.last.request.headers["content-type"] == "application/json"


async def test_single_object_reply_applies_to_every_message(provider, delivery_client):
    provider.mock(return_value=httpx.Response(200, json={"Status": "Success", "Message": "ok"}))

    outcomes = await delivery_client.deliver(_messages(3), "Acme")

    assert outcomes == [DeliveryOutcome("Success", "ok")] * 3
    assert all(o.is_success for o in outcomes)


async def test_array_reply_matches_positionally(provider, delivery_client):
    provider.mock(return_value=httpx.Response(200, json=[
        {"Status": "Success", "Message": "ok"},
        {"Status": "Failed", "Message": "invalid number"},
    ]))

    outcomes = await delivery_client.deliver(_messages(3), "Acme")

    assert [o.status for o in outcomes] == ["Success", "Failed", "Success"]
    assert outcomes[1].message == "invalid number"


async def test_non_json_reply_is_failure_with_raw_body(provider, delivery_client):
    provider.mock(return_value=httpx.Response(200, text="Service Unavailable"))

    outcomes = await delivery_client.deliver(_messages(2), "Acme")

    assert outcomes == [DeliveryOutcome("Failed", "Service Unavailable")] * 2


async def test_http_error_status_still_parses_body(provider, delivery_client):
    provider.mock(return_value=httpx.Response(500, json={"Status": "Failed", "Message": "internal"}))

    outcomes = await delivery_client.deliver(_messages(1), "Acme")

    assert outcomes == [DeliveryOutcome("Failed", "internal")]


async def test_timeout_raises_transport_exception(provider, delivery_client):
    provider.mock(side_effect=httpx.ConnectTimeout("timed out"))

    with pytest.raises(TransportException) as exc_info:
        await delivery_client.deliver(_messages(1), "Acme")

    assert exc_info.value.message == "Failed to send SMS"
    assert "ConnectTimeout" in exc_info.value.error


async def test_injected_http_client_is_used(provider, settings):
    provider.mock(return_value=httpx.Response(200, json={"Status": "Success", "Message": "ok"}))

    async with httpx.AsyncClient() as http_client:
        client = DeliveryClient(settings.sms_api_url, "u", "p", http_client=http_client)
        outcomes = await client.deliver(_messages(1), "Acme")

    assert outcomes[0].is_success
    assert provider.called


@pytest.mark.parametrize("body", [
    "",
    "[]",
    "42",
    '{"Message": "no status"}',
    '["not an object"]',
])
def test_parse_response_unexpected_shapes(body):
    assert DeliveryClient.parse_response(body) == [DeliveryOutcome("Failed", body)]


def test_parse_response_missing_message():
    assert DeliveryClient.parse_response('{"Status": "Success"}') == [DeliveryOutcome("Success", "")]


def test_align_outcomes_truncates_extra_entries():
    outcomes = [DeliveryOutcome("Success"), DeliveryOutcome("Failed"), DeliveryOutcome("Success")]
    assert DeliveryClient.align_outcomes(outcomes, 2) == outcomes[:2]


@pytest.mark.parametrize("status,success", [
    ("Success", True),
    ("success", True),
    ("SUCCESS", True),
    (" Success ", False),
    ("OK", False),
    ("Failed", False),
    ("", False),
])
def test_outcome_classification(status, success):
    assert DeliveryOutcome(status).is_success is success
