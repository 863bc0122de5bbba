"""Cinema value objects"""

from src.service.cinema.domain.value_object.reservation_policy import (
    RefundQuote,
    ReservationPolicy,
    utc_now,
)
from src.service.cinema.domain.value_object.screening import (
    Screening,
    combine_showtime,
    day_window,
    normalize_showtime,
)
from src.service.cinema.domain.value_object.seat_position import SeatPosition

__all__ = [
    'RefundQuote',
    'ReservationPolicy',
    'Screening',
    'SeatPosition',
    'combine_showtime',
    'day_window',
    'normalize_showtime',
    'utc_now',
]
