from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_reservation_command_repo import IReservationCommandRepo
from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.screening import Screening
from src.service.cinema.driven_adapter.model.reservation_model import (
    ReservationModel,
    ReservationSeatModel,
)
from src.service.cinema.driven_adapter.repo.reservation_query_repo_impl import (
    ReservationQueryRepoImpl,
)


class ReservationCommandRepoImpl(IReservationCommandRepo):
    """Writes run on the unit of work's session; nothing here commits"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    _to_entity = staticmethod(ReservationQueryRepoImpl._to_entity)

    @Logger.io
    async def lock_screening(self, *, screening: Screening) -> None:
        # Released automatically on commit/rollback
        await self.session.execute(
            text('SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))'),
            {'key': screening.lock_key},
        )

    @Logger.io
    async def create(self, *, reservation: Reservation, screening: Screening) -> Reservation:
        self.session.add(
            ReservationModel(
                id=reservation.id,
                user_id=reservation.user_id,
                movie_id=reservation.movie_id,
                hall_id=reservation.hall_id,
                showtime=reservation.showtime,
                showtime_date=reservation.showtime_date,
                seats=[{'row': seat.row, 'number': seat.number} for seat in reservation.seats],
                status=reservation.status.value,
                amount=reservation.amount,
                currency=reservation.currency,
                payment_reference=reservation.payment_reference,
                hold_expires_at=reservation.hold_expires_at,
                created_at=reservation.created_at,
                updated_at=reservation.updated_at,
            )
        )
        try:
            await self.session.flush()
            # Seat rows carry the lock key's local day so the unique index and the lock agree
            self.session.add_all(
                [
                    ReservationSeatModel(
                        reservation_id=reservation.id,
                        seat_row=seat.row,
                        seat_number=seat.number,
                        hall_id=reservation.hall_id,
                        showtime=reservation.showtime,
                        show_date=screening.show_date,
                    )
                    for seat in reservation.seats
                ]
            )
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError('One or more seats are already reserved for this showtime') from e
        return reservation

    @Logger.io
    async def update(self, *, reservation: Reservation) -> Reservation:
        await self.session.execute(
            update(ReservationModel)
            .where(ReservationModel.id == reservation.id)
            .values(
                status=reservation.status.value,
                payment_reference=reservation.payment_reference,
                refund_reference=reservation.refund_reference,
                refund_amount=reservation.refund_amount,
                refunded_at=reservation.refunded_at,
                hold_expires_at=reservation.hold_expires_at,
                updated_at=reservation.updated_at,
            )
        )
        if reservation.status == ReservationStatus.CANCELLED:
            await self.session.execute(
                delete(ReservationSeatModel).where(
                    ReservationSeatModel.reservation_id == reservation.id
                )
            )
        return reservation

    @Logger.io
    async def get_by_id_for_update(self, *, reservation_id: UUID) -> Optional[Reservation]:
        result = await self.session.execute(
            select(ReservationModel).where(ReservationModel.id == reservation_id).with_for_update()
        )
        db_reservation = result.scalar_one_or_none()
        return self._to_entity(db_reservation) if db_reservation else None

    @Logger.io
    async def get_pending_by_payment_reference_for_update(
        self, *, payment_reference: str, user_id: int
    ) -> Optional[Reservation]:
        result = await self.session.execute(
            select(ReservationModel)
            .where(
                ReservationModel.payment_reference == payment_reference,
                ReservationModel.user_id == user_id,
                ReservationModel.status == ReservationStatus.PENDING.value,
            )
            .with_for_update()
        )
        db_reservation = result.scalar_one_or_none()
        return self._to_entity(db_reservation) if db_reservation else None

    @Logger.io(truncate_content=True)
    async def list_stale_pending_for_update(self, *, now: datetime) -> List[Reservation]:
        result = await self.session.execute(
            select(ReservationModel)
            .where(
                ReservationModel.status == ReservationStatus.PENDING.value,
                ReservationModel.hold_expires_at <= now,
            )
            .with_for_update(skip_locked=True)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io(truncate_content=True)
    async def list_past_reserved_for_update(
        self, *, now: datetime, user_id: Optional[int] = None
    ) -> List[Reservation]:
        stmt = select(ReservationModel).where(
            ReservationModel.status == ReservationStatus.RESERVED.value,
            ReservationModel.showtime_date < now,
        )
        if user_id is not None:
            stmt = stmt.where(ReservationModel.user_id == user_id)
        result = await self.session.execute(stmt.with_for_update(skip_locked=True))
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def delete(self, *, reservation_id: UUID) -> bool:
        result = await self.session.execute(
            delete(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .returning(ReservationModel.id)
        )
        return result.scalar_one_or_none() is not None
