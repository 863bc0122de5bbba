from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.value_object.screening import Screening


class IReservationCommandRepo(ABC):
    """Repository interface for reservation writes (always used inside a unit of work)"""

    @abstractmethod
    async def lock_screening(self, *, screening: Screening) -> None:
        """Serialize writers of one screening until the transaction ends"""
        pass

    @abstractmethod
    async def create(self, *, reservation: Reservation, screening: Screening) -> Reservation:
        """Insert a reservation and its seat holds; raises ConflictError on a taken seat"""
        pass

    @abstractmethod
    async def update(self, *, reservation: Reservation) -> Reservation:
        """Persist status and refund fields; releases seat holds of cancelled reservations"""
        pass

    @abstractmethod
    async def get_by_id_for_update(self, *, reservation_id: UUID) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def get_pending_by_payment_reference_for_update(
        self, *, payment_reference: str, user_id: int
    ) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def list_stale_pending_for_update(self, *, now: datetime) -> List[Reservation]:
        """Pending reservations whose hold is due, skipping rows locked by other workers"""
        pass

    @abstractmethod
    async def list_past_reserved_for_update(
        self, *, now: datetime, user_id: Optional[int] = None
    ) -> List[Reservation]:
        pass

    @abstractmethod
    async def delete(self, *, reservation_id: UUID) -> bool:
        pass
