"""Counter behaviour under concurrent sends, using in-memory repositories.

The fakes mirror the atomicity of the SQL implementation: an increment or
a reset is a single step with no await inside, like one UPDATE statement.
"""
import asyncio
import dataclasses
import random
from datetime import datetime
from types import SimpleNamespace
from uuid import uuid4

from app.application.dtos.sms_dto import SmsRequest
from app.application.use_cases.sms_use_cases import AsyncSmsService
from app.domain.exceptions import QuotaExceededException
from app.domain.models.client_domain_model import AuthenticatedClient, Client
from app.domain.models.sms_domain_model import DeliveryOutcome, RequestMetadata
from app.domain.services.quota_service import QuotaService


class FakeClients:
    def __init__(self, client: Client):
        self.client = client
        self.observed = []

    def snapshot(self) -> Client:
        return dataclasses.replace(self.client)

    async def increment_usage(self, db, client_id, amount):
        if amount <= 0:
            return
        self.client.daily_usage += amount
        self.client.monthly_usage += amount
        self.observed.append(self.client.daily_usage)

    async def reset_daily_usage(self, db, window_start, now):
        self.client.daily_usage = 0
        self.client.last_reset = now
        self.observed.append(0)
        return 1


class FakeLogs:
    def __init__(self):
        self.entries = []

    async def create(self, db, *, obj_in):
        entry = SimpleNamespace(id=uuid4(), **obj_in)
        self.entries.append(entry)
        return entry

    async def create_many(self, db, entries):
        return [await self.create(db, obj_in=e) for e in entries]


class SlowProvider:
    """Accepts everything after yielding to the event loop a few times."""

    def __init__(self, seed: int = 7):
        self.random = random.Random(seed)

    async def deliver(self, messages, default_sender_id):
        for _ in range(self.random.randint(1, 4)):
            await asyncio.sleep(0)
        return [DeliveryOutcome("Success", "ok") for _ in messages]


async def test_counters_stay_within_limit_plus_window():
    limit = 10
    window = 5
    clients = FakeClients(Client(
        id=uuid4(), name="Acme", email="acme@example.com", api_key="k",
        is_active=True, rate_limit=100, daily_limit=limit, monthly_limit=10_000,
    ))
    logs = FakeLogs()
    service = AsyncSmsService(None, SlowProvider(), clients=clients, logs=logs)
    in_flight = asyncio.Semaphore(window)
    rejected = []

    async def send(i):
        async with in_flight:
            snapshot = clients.snapshot()
            try:
                QuotaService.check_quota(snapshot)
            except QuotaExceededException:
                rejected.append(i)
                return
            await service.send_single(
                AuthenticatedClient(snapshot),
                SmsRequest(number="0701234567", message=f"msg {i}"),
                RequestMetadata(),
            )

    async def reset_midway():
        for _ in range(20):
            await asyncio.sleep(0)
        await clients.reset_daily_usage(None, None, datetime.now())

    await asyncio.gather(reset_midway(), *(send(i) for i in range(60)))

    assert clients.observed
    assert min(clients.observed) >= 0
    assert max(clients.observed) <= limit + window
    assert clients.client.daily_usage <= limit + window
    assert rejected
    # Every accepted send produced exactly one log entry and one increment
    assert len(logs.entries) == 60 - len(rejected)
    assert clients.client.monthly_usage == len(logs.entries)


async def test_bulk_increment_is_single_step():
    clients = FakeClients(Client(
        id=uuid4(), name="Acme", email="acme@example.com", api_key="k",
        is_active=True, rate_limit=100, daily_limit=100, monthly_limit=1000,
    ))
    service = AsyncSmsService(None, SlowProvider(), clients=clients, logs=FakeLogs())
    batch = [SmsRequest(number=f"070123456{i}", message="hi") for i in range(4)]

    await asyncio.gather(*(
        service.send_bulk(AuthenticatedClient(clients.snapshot()), batch, RequestMetadata())
        for _ in range(3)
    ))

    assert clients.observed == [4, 8, 12]
