from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_hall_repo import IHallCommandRepo, IHallQueryRepo
from src.service.cinema.domain.entity.hall_entity import Hall, Seat
from src.service.cinema.driven_adapter.model.hall_model import HallModel, HallSeatModel


def _to_entity(db_hall: HallModel) -> Hall:
    return Hall(
        id=db_hall.id,
        name=db_hall.name,
        total_seats=db_hall.total_seats,
        seats=[
            Seat(row=seat.seat_row, number=seat.seat_number, price=seat.price)
            for seat in db_hall.seats
        ],
        created_at=db_hall.created_at,
        updated_at=db_hall.updated_at,
    )


class HallQueryRepoImpl(IHallQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, hall_id: int) -> Optional[Hall]:
        async with self.session_factory() as session:
            result = await session.execute(select(HallModel).where(HallModel.id == hall_id))
            db_hall = result.scalar_one_or_none()
            return _to_entity(db_hall) if db_hall else None

    @Logger.io
    async def list_by_ids(self, *, hall_ids: List[int]) -> List[Hall]:
        if not hall_ids:
            return []
        async with self.session_factory() as session:
            result = await session.execute(select(HallModel).where(HallModel.id.in_(hall_ids)))
            return [_to_entity(db_hall) for db_hall in result.scalars().all()]


class HallCommandRepoImpl(IHallCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        """Each seeding step commits on its own"""
        async with self.session_factory() as session:
            yield session
            await session.commit()

    @Logger.io
    async def count(self) -> int:
        async with self._get_session() as session:
            result = await session.execute(select(func.count()).select_from(HallModel))
            return int(result.scalar_one())

    @Logger.io
    async def delete_all(self) -> int:
        async with self._get_session() as session:
            result = await session.execute(delete(HallModel).returning(HallModel.id))
            return len(result.all())

    @Logger.io(truncate_content=True)
    async def create_many(self, *, halls: List[Hall]) -> List[Hall]:
        async with self._get_session() as session:
            db_halls = [
                HallModel(
                    name=hall.name,
                    total_seats=hall.total_seats,
                    seats=[
                        HallSeatModel(
                            seat_row=seat.row, seat_number=seat.number, price=seat.price
                        )
                        for seat in hall.seats
                    ],
                )
                for hall in halls
            ]
            session.add_all(db_halls)
            await session.flush()
            return [_to_entity(db_hall) for db_hall in db_halls]
