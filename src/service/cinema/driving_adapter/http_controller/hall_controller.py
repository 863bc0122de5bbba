from datetime import date

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.query.get_seat_availability_use_case import (
    GetSeatAvailabilityUseCase,
)
from src.service.cinema.app.query.list_showtimes_use_case import ListShowtimesUseCase
from src.service.cinema.driving_adapter.http_controller.schema.seat_schema import (
    SeatCheckReportResponse,
    SeatCheckRequest,
    SeatMapResponse,
    ShowtimeScheduleResponse,
)


router = APIRouter()


@router.get('/{hall_id}/seats')
@Logger.io(truncate_content=True)
async def get_hall_seats(
    hall_id: int,
    showtime: str,
    show_date: date = Query(alias='date'),
    use_case: GetSeatAvailabilityUseCase = Depends(GetSeatAvailabilityUseCase.depends),
) -> SeatMapResponse:
    seat_map = await use_case.by_hall(hall_id=hall_id, showtime=showtime, show_date=show_date)
    return SeatMapResponse.model_validate(seat_map)


@router.post('/{hall_id}/seats/check')
@Logger.io
async def check_hall_seats(
    hall_id: int,
    request: SeatCheckRequest,
    use_case: GetSeatAvailabilityUseCase = Depends(GetSeatAvailabilityUseCase.depends),
) -> SeatCheckReportResponse:
    report = await use_case.check_seats(
        hall_id=hall_id, showtime=request.showtime, show_date=request.date, seats=request.seats
    )
    return SeatCheckReportResponse.model_validate(report)


@router.get('/{hall_id}/showtimes')
@Logger.io(truncate_content=True)
async def list_hall_showtimes(
    hall_id: int,
    show_date: date = Query(alias='date'),
    use_case: ListShowtimesUseCase = Depends(ListShowtimesUseCase.depends),
) -> ShowtimeScheduleResponse:
    schedule = await use_case.for_hall(hall_id=hall_id, show_date=show_date)
    return ShowtimeScheduleResponse.model_validate(schedule)
