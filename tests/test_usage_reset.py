import asyncio
from datetime import datetime

import pytest

from app.application.use_cases.client_use_cases import AsyncClientService
from app.application.use_cases.usage_reset_use_cases import UsageResetScheduler
from app.domain.services.quota_service import QuotaService


class FakeSleep:
    """Records requested delays; cancels the caller after ``calls`` sleeps."""

    def __init__(self, calls: int):
        self.remaining = calls
        self.delays = []

    async def __call__(self, delay: float) -> None:
        if self.remaining == 0:
            raise asyncio.CancelledError()
        self.remaining -= 1
        self.delays.append(delay)


def test_boundaries():
    now = datetime(2026, 3, 14, 15, 9, 26)
    assert QuotaService.day_start(now) == datetime(2026, 3, 14)
    assert QuotaService.next_midnight(now) == datetime(2026, 3, 15)
    assert QuotaService.month_start(now) == datetime(2026, 3, 1)
    assert QuotaService.next_month_start(now) == datetime(2026, 4, 1)
    assert QuotaService.next_month_start(datetime(2026, 12, 31, 23, 59)) == datetime(2027, 1, 1)
    assert QuotaService.next_midnight(datetime(2026, 2, 28, 12)) == datetime(2026, 3, 1)


async def test_daily_reset(database, registered, set_client, load_client):
    await set_client(registered.client_id, daily_usage=5, monthly_usage=9,
                     last_reset=datetime(2026, 3, 13, 8), last_monthly_reset=datetime(2026, 3, 1))
    now = datetime(2026, 3, 14, 0, 0, 1)
    scheduler = UsageResetScheduler(database, clock=lambda: now)

    assert await scheduler.reset_daily_usage() == 1
    client = await load_client(registered.client_id)
    assert (client.daily_usage, client.monthly_usage) == (0, 9)
    assert client.last_reset == now

    # Idempotent within the same day
    assert await scheduler.reset_daily_usage() == 0


async def test_monthly_reset_after_daily_already_ran(database, registered, set_client, load_client):
    await set_client(registered.client_id, daily_usage=3, monthly_usage=250,
                     last_reset=datetime(2026, 3, 31, 9), last_monthly_reset=datetime(2026, 3, 1))
    now = datetime(2026, 4, 1, 0, 0, 2)
    scheduler = UsageResetScheduler(database, clock=lambda: now)

    await scheduler.reset_daily_usage()
    assert await scheduler.reset_monthly_usage() == 1

    client = await load_client(registered.client_id)
    assert (client.daily_usage, client.monthly_usage) == (0, 0)
    assert client.last_monthly_reset == now
    assert await scheduler.reset_monthly_usage() == 0


async def test_deleted_clients_are_not_reset(database, registered, set_client, load_client):
    await set_client(registered.client_id, daily_usage=4, last_reset=datetime(2026, 1, 1),
                     deleted_at=datetime(2026, 1, 2))
    scheduler = UsageResetScheduler(database, clock=lambda: datetime(2026, 1, 3))

    assert await scheduler.reset_daily_usage() == 0
    assert (await load_client(registered.client_id)).daily_usage == 4


async def test_daily_loop_sleeps_until_midnight(database, registered, set_client, load_client):
    await set_client(registered.client_id, daily_usage=7, last_reset=datetime(2026, 3, 30, 10))
    clock = iter([datetime(2026, 3, 31, 22, 0), datetime(2026, 4, 1, 0, 0), datetime(2026, 4, 1, 0, 0)])
    sleep = FakeSleep(calls=1)
    scheduler = UsageResetScheduler(database, clock=lambda: next(clock), sleep=sleep)

    await scheduler.run_daily()

    assert sleep.delays == [7200.0]
    assert (await load_client(registered.client_id)).daily_usage == 0


async def test_monthly_loop_sleeps_until_first_of_month(database):
    now = datetime(2026, 12, 31, 23, 0)
    sleep = FakeSleep(calls=2)
    scheduler = UsageResetScheduler(database, clock=lambda: now, sleep=sleep)

    await scheduler.run_monthly()

    assert sleep.delays == [3600.0, 3600.0]


async def test_loop_survives_reset_errors(database):
    calls = []

    class FlakyClients:
        async def reset_daily_usage(self, db, window_start, now):
            calls.append(now)
            if len(calls) == 1:
                raise RuntimeError("database went away")
            return 0

    scheduler = UsageResetScheduler(database, clock=lambda: datetime(2026, 5, 5, 12),
                                    sleep=FakeSleep(calls=2), clients=FlakyClients())

    await scheduler.run_daily()

    assert len(calls) == 2


async def test_start_and_stop(database):
    scheduler = UsageResetScheduler(database)

    scheduler.start()
    await asyncio.sleep(0)
    await scheduler.stop()

    assert scheduler._daily_task is None
    assert scheduler._monthly_task is None


async def test_admin_reset_usage_over_limit(database, registered, set_client, load_client):
    await set_client(registered.client_id, daily_limit=10, daily_usage=12, monthly_limit=20, monthly_usage=25,
                     last_reset=datetime(2026, 1, 1))
    now = datetime(2026, 6, 15, 10, 30)

    async with database.session() as db:
        await AsyncClientService(db, clock=lambda: now).reset_usage(registered.client_id)

    client = await load_client(registered.client_id)
    assert (client.daily_usage, client.monthly_usage) == (0, 0)
    assert client.last_reset == now
    assert client.last_monthly_reset == now


async def test_admin_reset_unknown_client(database):
    from uuid import uuid4
    from app.domain.exceptions import ResourceNotFoundException

    async with database.session() as db:
        with pytest.raises(ResourceNotFoundException):
            await AsyncClientService(db).reset_usage(uuid4())
