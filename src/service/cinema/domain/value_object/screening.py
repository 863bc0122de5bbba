"""
Screening Value Object

A screening is one showing of a hall: (hall, showtime token, local calendar day).
Seat holds are scoped to a screening, so it is also the unit of mutual exclusion
when creating reservations.
"""

from datetime import date, datetime, time, timedelta, timezone
import re
from zoneinfo import ZoneInfo

import attrs

from src.platform.exception.exceptions import DomainError


SHOWTIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')


def normalize_showtime(token: str) -> str:
    """`9:05` -> `09:05`; rejects anything that is not a valid time of day"""
    match = SHOWTIME_PATTERN.match((token or '').strip())
    if not match:
        raise DomainError(f'Invalid showtime "{token}". Use HH:MM (e.g., 18:45)')
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise DomainError(f'Invalid showtime "{token}". Use HH:MM (e.g., 18:45)')
    return f'{hours:02d}:{minutes:02d}'


def combine_showtime(show_date: date, showtime: str, tz: ZoneInfo) -> datetime:
    """Local date + `HH:MM` token -> aware UTC instant"""
    hours, minutes = (int(part) for part in normalize_showtime(showtime).split(':'))
    local = datetime.combine(show_date, time(hours, minutes), tzinfo=tz)
    return local.astimezone(timezone.utc)


def day_window(show_date: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Local calendar day [00:00:00, 23:59:59.999] as UTC instants"""
    start_local = datetime.combine(show_date, time.min, tzinfo=tz)
    end_local = start_local + timedelta(days=1) - timedelta(milliseconds=1)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


@attrs.define(frozen=True)
class Screening:
    hall_id: int
    showtime: str
    show_date: date
    day_start: datetime
    day_end: datetime

    @classmethod
    def of(cls, *, hall_id: int, showtime: str, show_date: date, tz: ZoneInfo) -> 'Screening':
        day_start, day_end = day_window(show_date, tz)
        return cls(
            hall_id=hall_id,
            showtime=normalize_showtime(showtime),
            show_date=show_date,
            day_start=day_start,
            day_end=day_end,
        )

    @property
    def lock_key(self) -> str:
        return f'{self.hall_id}|{self.showtime}|{self.show_date.isoformat()}'

    def contains(self, *, hall_id: int, showtime: str, showtime_date: datetime) -> bool:
        return (
            hall_id == self.hall_id
            and showtime == self.showtime
            and self.day_start <= showtime_date <= self.day_end
        )
