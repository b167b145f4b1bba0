import httpx
import pytest

SEND = "/api/v1/sms/send"
BULK = "/api/v1/sms/send/bulk"
ADMIN = "/api/v1/admin/clients"


async def test_health(http):
    r = await http.get("/health")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["service"] == "sms-gateway"
    assert "time" in body


async def test_send_success(http, provider, api_headers):
    provider.mock(return_value=httpx.Response(200, json={"Status": "Success", "Message": "Message sent"}))

    r = await http.post(SEND, json={"number": "0701234567", "message": "hello"}, headers=api_headers)

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "SMS sent successfully"
    assert body["data"]["recipient"] == "+256701234567"
    assert body["data"]["status"] == "sent"
    assert body["data"]["provider_response"] == {"status": "Success", "message": "Message sent"}
    assert body["data"]["log_id"]


async def test_send_provider_rejection_is_200(http, provider, api_headers):
    provider.mock(return_value=httpx.Response(200, json={"Status": "Failed", "Message": "invalid number"}))

    r = await http.post(SEND, json={"number": "0701234567", "message": "hello"}, headers=api_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "SMS failed to send"
    assert body["error"] == "invalid number"
    assert body["data"]["status"] == "failed"


async def test_send_transport_error_is_500(http, provider, api_headers, registered, load_logs):
    provider.mock(side_effect=httpx.ConnectError("refused"))

    r = await http.post(SEND, json={"number": "0701234567", "message": "hello"}, headers=api_headers)

    assert r.status_code == 500
    assert r.json()["success"] is False
    assert r.json()["message"] == "Failed to send SMS"
    logs = await load_logs(registered.client_id)
    assert [l.provider_status for l in logs] == ["error"]


@pytest.mark.parametrize("payload", [
    {"number": "12", "message": "hello"},
    {"number": "0701234567", "message": ""},
    {"number": "0701234567"},
    {"number": "0701234567", "message": "x" * 1601},
    {"number": "0701234567", "message": "hi", "senderid": "TOO-LONG-SENDER"},
])
async def test_send_invalid_input_is_400(http, provider, api_headers, payload, registered, load_logs):
    r = await http.post(SEND, json=payload, headers=api_headers)

    assert r.status_code == 400, r.text
    assert r.json()["success"] is False
    assert not provider.called
    assert await load_logs(registered.client_id) == []


async def test_send_requires_credentials(http, provider):
    r = await http.post(SEND, json={"number": "0701234567", "message": "hello"})

    assert r.status_code == 401
    assert r.json() == {
        "success": False,
        "message": "Missing API credentials",
        "error": "X-API-Key and X-API-Secret headers are required",
    }


async def test_unknown_key_and_wrong_secret_same_response(http, registered):
    unknown = await http.post(SEND, json={"number": "0701234567", "message": "hi"},
                              headers={"X-API-Key": "nope", "X-API-Secret": registered.api_secret})
    wrong = await http.post(SEND, json={"number": "0701234567", "message": "hi"},
                            headers={"X-API-Key": registered.api_key, "X-API-Secret": "nope"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


async def test_inactive_client_is_403(http, api_headers, registered, set_client):
    await set_client(registered.client_id, is_active=False)

    r = await http.post(SEND, json={"number": "0701234567", "message": "hi"}, headers=api_headers)

    assert r.status_code == 403


async def test_daily_limit_is_429(http, provider, api_headers, registered, set_client):
    await set_client(registered.client_id, daily_limit=3, daily_usage=3)

    r = await http.post(SEND, json={"number": "0701234567", "message": "hi"}, headers=api_headers)

    assert r.status_code == 429
    assert r.json()["message"] == "Daily limit exceeded"
    assert not provider.called


async def test_bulk_send(http, provider, api_headers, registered, load_client):
    provider.mock(return_value=httpx.Response(200, json=[
        {"Status": "Success", "Message": "ok"},
        {"Status": "Failed", "Message": "blocked"},
    ]))

    r = await http.post(BULK, json={"messages": [
        {"number": "0701234567", "message": "one"},
        {"number": "0701234568", "message": "two"},
    ]}, headers=api_headers)

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Bulk SMS processing completed"
    assert (body["data"]["total"], body["data"]["successful"], body["data"]["failed"]) == (2, 1, 1)
    assert [item["status"] for item in body["data"]["results"]] == ["sent", "failed"]
    assert (await load_client(registered.client_id)).daily_usage == 1


async def test_bulk_precheck_is_429(http, provider, api_headers, registered, set_client):
    await set_client(registered.client_id, daily_limit=10, daily_usage=8)

    r = await http.post(BULK, json={"messages": [
        {"number": "0701234567", "message": "one"},
        {"number": "0701234568", "message": "two"},
        {"number": "0701234569", "message": "three"},
    ]}, headers=api_headers)

    assert r.status_code == 429
    assert r.json()["message"] == "Bulk request would exceed daily limit"
    assert not provider.called


async def test_bulk_empty_is_400(http, api_headers):
    r = await http.post(BULK, json={"messages": []}, headers=api_headers)

    assert r.status_code == 400


async def test_logs_and_stats(http, provider, api_headers, registered, set_client):
    provider.mock(side_effect=[
        httpx.Response(200, json={"Status": "Success", "Message": "ok"}),
        httpx.Response(200, json={"Status": "Failed", "Message": "no"}),
    ])
    await http.post(SEND, json={"number": "0701234561", "message": "a"}, headers=api_headers)
    await http.post(SEND, json={"number": "0701234562", "message": "b"}, headers=api_headers)

    r = await http.get("/api/v1/sms/logs", headers=api_headers)
    assert r.status_code == 200
    assert [l["recipient"] for l in r.json()["data"]] == ["+256701234562", "+256701234561"]
    assert "api_secret_hash" not in r.text

    r = await http.get("/api/v1/sms/logs", params={"status": "sent", "limit": 1}, headers=api_headers)
    assert [l["recipient"] for l in r.json()["data"]] == ["+256701234561"]

    r = await http.get("/api/v1/sms/logs", params={"limit": 501}, headers=api_headers)
    assert r.status_code == 400

    # Reads still work once the quota is used up
    await set_client(registered.client_id, daily_limit=1)
    r = await http.get("/api/v1/sms/stats", headers=api_headers)
    assert r.status_code == 200
    assert r.json()["data"] == {
        "client_id": str(registered.client_id),
        "daily_usage": 1,
        "monthly_usage": 1,
        "daily_limit": 1,
        "monthly_limit": 300000,
        "is_active": True,
    }


async def test_admin_requires_basic_auth(http):
    r = await http.get(ADMIN)
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Basic"

    r = await http.get(ADMIN, auth=("admin", "wrong"))
    assert r.status_code == 401
    assert r.json()["success"] is False


async def test_admin_client_lifecycle(http, admin_auth, provider):
    r = await http.post(ADMIN, json={"name": "Shop Ltd", "email": "Shop@Example.com", "daily_limit": 50},
                        auth=admin_auth)
    assert r.status_code == 201, r.text
    created = r.json()["data"]
    assert created["email"] == "shop@example.com"
    assert (created["rate_limit"], created["daily_limit"], created["monthly_limit"]) == (100, 50, 300000)
    assert created["api_key"] and created["api_secret"]
    assert "warning" in created
    client_id = created["client_id"]

    r = await http.post(ADMIN, json={"name": "Other", "email": "shop@example.com"}, auth=admin_auth)
    assert r.status_code == 409

    r = await http.get(ADMIN, auth=admin_auth)
    listed = r.json()["data"]
    assert [c["id"] for c in listed] == [client_id]
    assert "api_secret" not in listed[0]
    assert "api_secret_hash" not in listed[0]

    r = await http.put(f"{ADMIN}/{client_id}", json={"is_active": False, "monthly_limit": 999}, auth=admin_auth)
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is False
    assert r.json()["data"]["monthly_limit"] == 999
    assert r.json()["data"]["daily_limit"] == 50

    r = await http.get(ADMIN, params={"is_active": "true"}, auth=admin_auth)
    assert r.json()["data"] == []

    r = await http.post(f"{ADMIN}/{client_id}/reset", auth=admin_auth)
    assert r.status_code == 200
    assert r.json()["data"]["daily_usage"] == 0

    r = await http.delete(f"{ADMIN}/{client_id}", auth=admin_auth)
    assert r.status_code == 200

    r = await http.put(f"{ADMIN}/{client_id}", json={"name": "Gone"}, auth=admin_auth)
    assert r.status_code == 404

    r = await http.post(ADMIN, json={"name": "Again", "email": "shop@example.com"}, auth=admin_auth)
    assert r.status_code == 409


async def test_created_credentials_authenticate(http, admin_auth, provider):
    provider.mock(return_value=httpx.Response(200, json={"Status": "Success", "Message": "ok"}))
    r = await http.post(ADMIN, json={"name": "New Co", "email": "new@example.com"}, auth=admin_auth)
    creds = r.json()["data"]

    r = await http.post(SEND, json={"number": "0701234567", "message": "hi"},
                        headers={"X-API-Key": creds["api_key"], "X-API-Secret": creds["api_secret"]})

    assert r.status_code == 200
    assert r.json()["success"] is True


async def test_admin_invalid_payloads(http, admin_auth):
    r = await http.post(ADMIN, json={"name": "", "email": "a@example.com"}, auth=admin_auth)
    assert r.status_code == 400

    r = await http.post(ADMIN, json={"name": "Ok", "email": "not-an-email"}, auth=admin_auth)
    assert r.status_code == 400

    r = await http.put(f"{ADMIN}/not-a-uuid", json={}, auth=admin_auth)
    assert r.status_code == 400


async def test_security_headers(http):
    r = await http.get("/health")

    assert r.headers["x-content-type-options"] == "nosniff"
    assert r.headers["x-frame-options"] == "DENY"


async def test_per_ip_rate_limit(settings, database, delivery_client):
    from app.main import create_app

    settings.RATE_LIMIT_RPS = 2
    app = create_app(settings, database=database, delivery_client=delivery_client)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        codes = [(await client.get("/api/v1/sms/stats")).status_code for _ in range(3)]

    assert codes[:2] == [401, 401]
    assert codes[2] == 429
