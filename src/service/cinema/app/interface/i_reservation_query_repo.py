from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.value_object.screening import Screening


class IReservationQueryRepo(ABC):
    """Repository interface for reservation reads"""

    @abstractmethod
    async def get_by_id(self, *, reservation_id: UUID) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def get_with_details(self, *, reservation_id: UUID) -> Optional[dict]:
        """One reservation with movie title and hall name"""
        pass

    @abstractmethod
    async def list_active_for_screening(self, *, screening: Screening) -> List[Reservation]:
        """Pending or reserved reservations holding seats in the screening"""
        pass

    @abstractmethod
    async def list_active_in_window(
        self,
        *,
        window_start: datetime,
        window_end: datetime,
        hall_id: Optional[int] = None,
        movie_id: Optional[int] = None,
    ) -> List[Reservation]:
        pass

    @abstractmethod
    async def list_user_reservations_with_details(self, *, user_id: int) -> List[dict]:
        """Newest first, with movie title and hall name"""
        pass

    @abstractmethod
    async def list_reservations_with_details(
        self,
        *,
        movie_id: Optional[int] = None,
        hall_id: Optional[int] = None,
        showtime: Optional[str] = None,
    ) -> List[dict]:
        pass
