from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

import attrs


@attrs.define
class Movie:
    title: str
    duration: int = 0  # Minutes
    genres: List[str] = attrs.field(factory=list)
    hall_id: Optional[int] = None
    showtimes: List[datetime] = attrs.field(factory=list)  # Absolute instants
    in_theaters: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def showtime_tokens_on(self, show_date: date, tz: ZoneInfo) -> List[str]:
        """`HH:MM` tokens of the scheduled showtimes falling on a local calendar day"""
        tokens = {
            showtime.astimezone(tz).strftime('%H:%M')
            for showtime in self.showtimes
            if showtime.astimezone(tz).date() == show_date
        }
        return sorted(tokens)
