from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import attrs

from src.platform.config.core_setting import settings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@attrs.define(frozen=True)
class ReservationPolicy:
    """Time windows and fees governing the reservation lifecycle"""

    hold_duration: timedelta = timedelta(minutes=15)
    cancellation_cutoff: timedelta = timedelta(minutes=5)
    fee_window: timedelta = timedelta(hours=24)
    fee_percent: int = 10
    currency: str = 'usd'
    timezone_name: str = 'UTC'

    @classmethod
    def from_settings(cls) -> 'ReservationPolicy':
        return cls(
            hold_duration=timedelta(minutes=settings.RESERVATION_HOLD_MINUTES),
            cancellation_cutoff=timedelta(minutes=settings.CANCELLATION_CUTOFF_MINUTES),
            fee_window=timedelta(hours=settings.CANCELLATION_FEE_WINDOW_HOURS),
            fee_percent=settings.CANCELLATION_FEE_PERCENT,
            currency=settings.PAYMENT_CURRENCY,
            timezone_name=settings.CINEMA_TIMEZONE,
        )

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)


@attrs.define(frozen=True)
class RefundQuote:
    original_amount: int
    refund_amount: int
    fee: int
    fee_applied: bool

    @classmethod
    def compute(
        cls, *, amount: int, showtime_date: datetime, now: datetime, policy: ReservationPolicy
    ) -> 'RefundQuote':
        # Fee applies strictly inside the window, exactly 24h before is still a full refund
        fee_applied = showtime_date - now < policy.fee_window
        refund_amount = amount * (100 - policy.fee_percent) // 100 if fee_applied else amount
        return cls(
            original_amount=amount,
            refund_amount=refund_amount,
            fee=amount - refund_amount,
            fee_applied=fee_applied,
        )
