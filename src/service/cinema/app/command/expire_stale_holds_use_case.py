from datetime import datetime
from typing import Callable
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.dto.reservation_result import SweepResult
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.reservation_policy import utc_now


class ExpireStaleHoldsUseCase:
    """
    Background transitions that need no caller:
    - pending -> cancelled once the payment hold ran out (frees the seats)
    - reserved -> expired once the showtime is in the past

    Driven by the per-reservation hold timer and by the periodic sweep. Each call
    opens its own unit of work, so it is built with a factory instead of a
    request-scoped UoW.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @Logger.io
    async def release_hold(self, *, reservation_id: UUID) -> bool:
        """Cancel one reservation if it is still pending past its hold. Returns True if released."""
        uow = self.uow_factory()
        async with uow:
            reservation = await uow.reservation_command_repo.get_by_id_for_update(
                reservation_id=reservation_id
            )
            now = self.clock()
            if not reservation or not reservation.is_hold_expired(now=now):
                return False

            await uow.reservation_command_repo.update(reservation=reservation.release_hold(now=now))
            await uow.commit()

        metrics.record_transition(
            from_status=ReservationStatus.PENDING,
            to_status=ReservationStatus.CANCELLED,
            trigger='hold_timeout',
        )
        Logger.base.info(f'⏰ [HOLD] Released unpaid reservation {reservation_id}')
        return True

    @Logger.io
    async def sweep(self) -> SweepResult:
        uow = self.uow_factory()
        async with uow:
            now = self.clock()

            stale = await uow.reservation_command_repo.list_stale_pending_for_update(now=now)
            for reservation in stale:
                await uow.reservation_command_repo.update(
                    reservation=reservation.release_hold(now=now)
                )

            past = await uow.reservation_command_repo.list_past_reserved_for_update(now=now)
            for reservation in past:
                await uow.reservation_command_repo.update(reservation=reservation.expire(now=now))

            await uow.commit()

        metrics.record_transition(
            from_status=ReservationStatus.PENDING,
            to_status=ReservationStatus.CANCELLED,
            trigger='hold_timeout',
            count=len(stale),
        )
        metrics.record_transition(
            from_status=ReservationStatus.RESERVED,
            to_status=ReservationStatus.EXPIRED,
            trigger='showtime_passed',
            count=len(past),
        )
        if stale or past:
            Logger.base.info(
                f'🧹 [SWEEP] Released {len(stale)} stale holds, expired {len(past)} reservations'
            )
        return SweepResult(
            released_holds=[reservation.id for reservation in stale], expired_count=len(past)
        )
