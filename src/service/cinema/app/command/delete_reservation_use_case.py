from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger


class DeleteReservationUseCase:
    """Unconditional hard delete (admin). Seat rows go with it through the FK cascade."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, reservation_id: UUID) -> None:
        async with self.uow:
            deleted = await self.uow.reservation_command_repo.delete(
                reservation_id=reservation_id
            )
            if not deleted:
                raise NotFoundError('Reservation not found')
            await self.uow.commit()

        Logger.base.info(f'🗑️ [DELETE] Reservation {reservation_id} removed')
