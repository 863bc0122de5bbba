from typing import Any, Dict, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.cinema.domain.value_object.screening import normalize_showtime


class ListReservationsUseCase:
    def __init__(self, *, reservation_query_repo: IReservationQueryRepo) -> None:
        self.reservation_query_repo = reservation_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
    ) -> Self:
        return cls(reservation_query_repo=reservation_query_repo)

    @Logger.io(truncate_content=True)
    async def execute(
        self,
        *,
        movie_id: Optional[int] = None,
        hall_id: Optional[int] = None,
        showtime: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return await self.reservation_query_repo.list_reservations_with_details(
            movie_id=movie_id,
            hall_id=hall_id,
            showtime=normalize_showtime(showtime) if showtime else None,
        )
