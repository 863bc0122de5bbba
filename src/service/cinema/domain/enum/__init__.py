"""Cinema domain enums"""

from src.service.cinema.domain.enum.reservation_status import ACTIVE_STATUSES, ReservationStatus
from src.service.cinema.domain.enum.seat_status import SeatStatus

__all__ = ['ACTIVE_STATUSES', 'ReservationStatus', 'SeatStatus']
