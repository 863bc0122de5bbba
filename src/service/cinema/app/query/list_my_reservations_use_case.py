from datetime import datetime
from typing import Any, Callable, Dict, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.reservation_policy import utc_now


class ListMyReservationsUseCase:
    """
    The caller's reservations, newest first.

    Reserved reservations whose showtime has passed are flipped to expired in the
    same transaction before the list is read, so the caller never sees a stale status.
    """

    def __init__(
        self, *, uow: AbstractUnitOfWork, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.uow = uow
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io(truncate_content=True)
    async def execute(self, *, user_id: int) -> List[Dict[str, Any]]:
        async with self.uow:
            now = self.clock()
            past = await self.uow.reservation_command_repo.list_past_reserved_for_update(
                now=now, user_id=user_id
            )
            for reservation in past:
                await self.uow.reservation_command_repo.update(
                    reservation=reservation.expire(now=now)
                )

            reservations = await self.uow.reservation_query_repo.list_user_reservations_with_details(
                user_id=user_id
            )
            await self.uow.commit()

        metrics.record_transition(
            from_status=ReservationStatus.RESERVED,
            to_status=ReservationStatus.EXPIRED,
            trigger='showtime_passed',
            count=len(past),
        )
        return reservations
