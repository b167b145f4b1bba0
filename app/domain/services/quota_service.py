# app/domain/services/quota_service.py

from datetime import datetime, timedelta

from app.domain.exceptions import (
    DailyLimitExceededException,
    MonthlyLimitExceededException,
    BulkQuotaExceededException,
)
from app.domain.models.client_domain_model import Client
from app.domain.models.sms_domain_model import DeliveryOutcome, DeliveryStatus


class QuotaService:
    """
    Domain rules for quota gates, outcome classification and reset windows.
    """

    @staticmethod
    def check_quota(client: Client) -> None:
        """
        Raise if the client has already used its daily or monthly allowance.

        The daily gate is checked first, so a client over both limits
        gets the daily error.
        """
        if client.daily_usage >= client.daily_limit:
            raise DailyLimitExceededException()
        if client.monthly_usage >= client.monthly_limit:
            raise MonthlyLimitExceededException()

    @staticmethod
    def check_bulk_quota(client: Client, count: int) -> None:
        if client.daily_usage + count > client.daily_limit:
            raise BulkQuotaExceededException()

    @staticmethod
    def classify(outcome: DeliveryOutcome) -> DeliveryStatus:
        return DeliveryStatus.SENT if outcome.is_success else DeliveryStatus.FAILED

    @staticmethod
    def day_start(now: datetime) -> datetime:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    @staticmethod
    def month_start(now: datetime) -> datetime:
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    @classmethod
    def next_midnight(cls, now: datetime) -> datetime:
        return cls.day_start(now) + timedelta(days=1)

    @classmethod
    def next_month_start(cls, now: datetime) -> datetime:
        start = cls.month_start(now)
        if start.month == 12:
            return start.replace(year=start.year + 1, month=1)
        return start.replace(month=start.month + 1)
