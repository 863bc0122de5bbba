from datetime import date

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.query.get_seat_availability_use_case import (
    GetSeatAvailabilityUseCase,
)
from src.service.cinema.app.query.list_showtimes_use_case import ListShowtimesUseCase
from src.service.cinema.driving_adapter.http_controller.schema.seat_schema import (
    SeatMapResponse,
    ShowtimeScheduleResponse,
)


router = APIRouter()


@router.get('/{movie_id}/seats')
@Logger.io(truncate_content=True)
async def get_movie_seats(
    movie_id: int,
    showtime: str,
    show_date: date = Query(alias='date'),
    use_case: GetSeatAvailabilityUseCase = Depends(GetSeatAvailabilityUseCase.depends),
) -> SeatMapResponse:
    seat_map = await use_case.by_movie(movie_id=movie_id, showtime=showtime, show_date=show_date)
    return SeatMapResponse.model_validate(seat_map)


@router.get('/{movie_id}/showtimes')
@Logger.io(truncate_content=True)
async def list_movie_showtimes(
    movie_id: int,
    show_date: date = Query(alias='date'),
    use_case: ListShowtimesUseCase = Depends(ListShowtimesUseCase.depends),
) -> ShowtimeScheduleResponse:
    schedule = await use_case.for_movie(movie_id=movie_id, show_date=show_date)
    return ShowtimeScheduleResponse.model_validate(schedule)
