# app/application/use_cases/usage_reset_use_cases.py (async version)

"""
Background reset of the per-client usage counters.

Two independent loops run for the lifetime of the process: one zeroes
the daily counters at local midnight, the other zeroes the monthly
counters on the first day of each month.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from app.adapters.outbound.persistence.database import Database
from app.adapters.outbound.persistence.repositories.client_repository import client_repository
from app.application.ports.outbound import IClientRepository
from app.domain.services.quota_service import QuotaService

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Sleeper = Callable[[float], Awaitable[None]]


class UsageResetScheduler:
    """
    Owns the daily and monthly reset tasks.

    The clock and sleep function are injectable so tests can drive the
    loops with a virtual clock. Resets are idempotent bulk updates; a send
    racing a reset at the boundary may be counted in either window.

    Args:
        database: Database handle used to open one session per reset
        clock: Source of the current local time
        sleep: Coroutine function used to wait for the next boundary
        clients: Client repository
    """

    def __init__(
            self,
            database: Database,
            clock: Clock = datetime.now,
            sleep: Sleeper = asyncio.sleep,
            clients: IClientRepository = client_repository,
    ):
        self.database = database
        self.clock = clock
        self.sleep = sleep
        self.clients = clients
        self._daily_task: Optional[asyncio.Task] = None
        self._monthly_task: Optional[asyncio.Task] = None

    async def reset_daily_usage(self) -> int:
        """Zero the daily counters of clients not reset since today's midnight."""
        now = self.clock()
        async with self.database.session() as db:
            count = await self.clients.reset_daily_usage(db, QuotaService.day_start(now), now)
        logger.info(f"Reset daily usage for {count} clients")
        return count

    async def reset_monthly_usage(self) -> int:
        """Zero the monthly counters of clients not reset since the first of the month."""
        now = self.clock()
        async with self.database.session() as db:
            count = await self.clients.reset_monthly_usage(db, QuotaService.month_start(now), now)
        logger.info(f"Reset monthly usage for {count} clients")
        return count

    async def _run_loop(
            self,
            name: str,
            next_boundary: Callable[[datetime], datetime],
            reset: Callable[[], Awaitable[int]],
    ) -> None:
        while True:
            try:
                now = self.clock()
                delay = max((next_boundary(now) - now).total_seconds(), 0.0)
                await self.sleep(delay)
                await reset()
            except asyncio.CancelledError:
                logger.info(f"{name} usage reset task cancelled")
                break
            except Exception as e:
                logger.exception(f"Error resetting {name} usage: {e}")

    async def run_daily(self) -> None:
        await self._run_loop("daily", QuotaService.next_midnight, self.reset_daily_usage)

    async def run_monthly(self) -> None:
        await self._run_loop("monthly", QuotaService.next_month_start, self.reset_monthly_usage)

    def start(self) -> None:
        if self._daily_task is None:
            self._daily_task = asyncio.create_task(self.run_daily())
        if self._monthly_task is None:
            self._monthly_task = asyncio.create_task(self.run_monthly())
        logger.info("Usage reset scheduler started")

    async def stop(self) -> None:
        for task in (self._daily_task, self._monthly_task):
            if task is None:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._daily_task = None
        self._monthly_task = None
