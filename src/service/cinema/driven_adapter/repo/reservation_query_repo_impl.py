from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncContextManager, AsyncIterator, Callable, List, Optional
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.enum.reservation_status import ACTIVE_STATUSES, ReservationStatus
from src.service.cinema.domain.value_object.screening import Screening
from src.service.cinema.domain.value_object.seat_position import SeatPosition
from src.service.cinema.driven_adapter.model.hall_model import HallModel
from src.service.cinema.driven_adapter.model.movie_model import MovieModel
from src.service.cinema.driven_adapter.model.reservation_model import ReservationModel


_ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_STATUSES]


class ReservationQueryRepoImpl(IReservationQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get session for query execution.

        If session is injected (from UoW), yield it directly so reads see the
        transaction's own writes and locks. Otherwise open a short-lived session.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @staticmethod
    def _to_entity(db_reservation: ReservationModel) -> Reservation:
        return Reservation(
            id=db_reservation.id,
            user_id=db_reservation.user_id,
            movie_id=db_reservation.movie_id,
            hall_id=db_reservation.hall_id,
            showtime=db_reservation.showtime,
            showtime_date=db_reservation.showtime_date,
            seats=[
                SeatPosition(row=str(seat['row']), number=int(seat['number']))
                for seat in db_reservation.seats or []
            ],
            amount=db_reservation.amount,
            currency=db_reservation.currency,
            status=ReservationStatus(db_reservation.status),
            payment_reference=db_reservation.payment_reference,
            refund_reference=db_reservation.refund_reference,
            refund_amount=db_reservation.refund_amount,
            refunded_at=db_reservation.refunded_at,
            hold_expires_at=db_reservation.hold_expires_at,
            created_at=db_reservation.created_at,
            updated_at=db_reservation.updated_at,
        )

    @staticmethod
    def _to_reservation_dict(
        db_reservation: ReservationModel, movie_title: Optional[str], hall_name: Optional[str]
    ) -> dict[str, Any]:
        return {
            'id': db_reservation.id,
            'user_id': db_reservation.user_id,
            'movie_id': db_reservation.movie_id,
            'movie_title': movie_title or 'Unknown Movie',
            'hall_id': db_reservation.hall_id,
            'hall_name': hall_name or 'Unknown Hall',
            'showtime': db_reservation.showtime,
            'showtime_date': db_reservation.showtime_date,
            'seats': db_reservation.seats or [],
            'status': db_reservation.status,
            'amount': db_reservation.amount,
            'currency': db_reservation.currency,
            'payment_reference': db_reservation.payment_reference,
            'refund_reference': db_reservation.refund_reference,
            'refund_amount': db_reservation.refund_amount,
            'refunded_at': db_reservation.refunded_at,
            'hold_expires_at': db_reservation.hold_expires_at,
            'created_at': db_reservation.created_at,
            'updated_at': db_reservation.updated_at,
        }

    @staticmethod
    def _with_details() -> Select:
        return (
            select(ReservationModel, MovieModel.title, HallModel.name)
            .outerjoin(MovieModel, MovieModel.id == ReservationModel.movie_id)
            .outerjoin(HallModel, HallModel.id == ReservationModel.hall_id)
        )

    @Logger.io
    async def get_by_id(self, *, reservation_id: UUID) -> Optional[Reservation]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ReservationModel).where(ReservationModel.id == reservation_id)
            )
            db_reservation = result.scalar_one_or_none()
            return self._to_entity(db_reservation) if db_reservation else None

    @Logger.io
    async def get_with_details(self, *, reservation_id: UUID) -> Optional[dict]:
        # populate_existing: the row may already sit in the UoW session with pre-update values
        stmt = (
            self._with_details()
            .where(ReservationModel.id == reservation_id)
            .execution_options(populate_existing=True)
        )
        async with self._get_session() as session:
            row = (await session.execute(stmt)).one_or_none()
            if row is None:
                return None
            db_reservation, movie_title, hall_name = row
            return self._to_reservation_dict(db_reservation, movie_title, hall_name)

    @Logger.io
    async def list_active_for_screening(self, *, screening: Screening) -> List[Reservation]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ReservationModel).where(
                    ReservationModel.hall_id == screening.hall_id,
                    ReservationModel.showtime == screening.showtime,
                    ReservationModel.showtime_date.between(screening.day_start, screening.day_end),
                    ReservationModel.status.in_(_ACTIVE_STATUS_VALUES),
                )
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_active_in_window(
        self,
        *,
        window_start: datetime,
        window_end: datetime,
        hall_id: Optional[int] = None,
        movie_id: Optional[int] = None,
    ) -> List[Reservation]:
        stmt = select(ReservationModel).where(
            ReservationModel.showtime_date.between(window_start, window_end),
            ReservationModel.status.in_(_ACTIVE_STATUS_VALUES),
        )
        if hall_id is not None:
            stmt = stmt.where(ReservationModel.hall_id == hall_id)
        if movie_id is not None:
            stmt = stmt.where(ReservationModel.movie_id == movie_id)

        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io(truncate_content=True)
    async def list_user_reservations_with_details(self, *, user_id: int) -> List[dict]:
        stmt = (
            self._with_details()
            .where(ReservationModel.user_id == user_id)
            .order_by(ReservationModel.created_at.desc(), ReservationModel.id.desc())
        )
        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [
                self._to_reservation_dict(db_reservation, movie_title, hall_name)
                for db_reservation, movie_title, hall_name in result.all()
            ]

    @Logger.io(truncate_content=True)
    async def list_reservations_with_details(
        self,
        *,
        movie_id: Optional[int] = None,
        hall_id: Optional[int] = None,
        showtime: Optional[str] = None,
    ) -> List[dict]:
        stmt = self._with_details()
        if movie_id is not None:
            stmt = stmt.where(ReservationModel.movie_id == movie_id)
        if hall_id is not None:
            stmt = stmt.where(ReservationModel.hall_id == hall_id)
        if showtime:
            stmt = stmt.where(ReservationModel.showtime == showtime)
        stmt = stmt.order_by(ReservationModel.created_at.desc(), ReservationModel.id.desc())

        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [
                self._to_reservation_dict(db_reservation, movie_title, hall_name)
                for db_reservation, movie_title, hall_name in result.all()
            ]
