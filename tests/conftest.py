"""Shared pytest fixtures.

Every test runs against a fresh in-memory SQLite database (aiosqlite) and
a provider endpoint mocked with respx, so no network or Postgres is needed.

  * ``settings``      test configuration, independent of any ``.env``
  * ``database``      ``Database`` handle with all tables created
  * ``provider``      respx route for the provider URL; set ``.mock(...)`` per test
  * ``app`` / ``http``  application from ``create_app`` and an ASGI httpx client
  * ``registered``    a client created through the admin use case
"""
from __future__ import annotations

from typing import AsyncIterator

import httpx
import pytest
import respx
from sqlalchemy import select, update

from app.adapters.configuration.config import Settings
from app.adapters.outbound.persistence.database import Database
from app.adapters.outbound.persistence.models import Client, SmsLog
from app.adapters.outbound.sms.delivery_client import DeliveryClient
from app.application.dtos.client_dto import ClientCreate
from app.application.use_cases.client_use_cases import AsyncClientService
from app.main import create_app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="testing",
        DATABASE_URL=TEST_DATABASE_URL,
        CREATE_TABLES_ON_STARTUP=False,
        USAGE_RESET_ENABLED=False,
        SMS_USERNAME="gateway-user",
        SMS_PASSWORD="gateway-pass",
        SMS_SENDER_ID="",
        SMS_SANDBOX_MODE=True,
        ADMIN_USER="admin",
        ADMIN_PASSWORD="s3cret",
        RATE_LIMIT_RPS=1000,
    )


@pytest.fixture
async def database() -> AsyncIterator[Database]:
    db = Database(TEST_DATABASE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def provider(settings):
    with respx.mock(assert_all_called=False) as mock:
        yield mock.post(settings.sms_api_url)


@pytest.fixture
def delivery_client(settings) -> DeliveryClient:
    return DeliveryClient.from_settings(settings)


@pytest.fixture
def app(settings, database, delivery_client):
    return create_app(settings, database=database, delivery_client=delivery_client)


@pytest.fixture
async def http(app) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def admin_auth(settings):
    return (settings.ADMIN_USER, settings.ADMIN_PASSWORD)


@pytest.fixture
def make_client(database):
    """Register a client through the admin use case; returns the one-time credentials."""

    async def _make(name: str = "Acme Corp", email: str = "acme@example.com", **limits):
        async with database.session() as db:
            return await AsyncClientService(db).create_client(ClientCreate(name=name, email=email, **limits))

    return _make


@pytest.fixture
async def registered(make_client):
    return await make_client()


@pytest.fixture
def api_headers(registered):
    return {"X-API-Key": registered.api_key, "X-API-Secret": registered.api_secret}


@pytest.fixture
def set_client(database):
    """Overwrite columns of a stored client."""

    async def _set(client_id, **values):
        async with database.session() as db:
            await db.execute(update(Client).where(Client.id == client_id).values(**values))

    return _set


@pytest.fixture
def load_client(database):
    async def _load(client_id) -> Client:
        async with database.session() as db:
            result = await db.execute(select(Client).where(Client.id == client_id))
            return result.scalar_one()

    return _load


@pytest.fixture
def load_logs(database):
    async def _load(client_id):
        async with database.session() as db:
            result = await db.execute(
                select(SmsLog).where(SmsLog.client_id == client_id).order_by(SmsLog.created_at.asc())
            )
            return list(result.scalars().all())

    return _load
