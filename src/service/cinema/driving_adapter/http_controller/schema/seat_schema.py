from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.cinema.driving_adapter.http_controller.schema.reservation_schema import SeatSchema


class SeatAvailabilityResponse(BaseModel):
    model_config = {'from_attributes': True}

    row: str
    number: int
    is_reserved: bool
    price: int


class SeatMapResponse(BaseModel):
    model_config = {
        'from_attributes': True,
        'json_schema_extra': {
            'example': {
                'hall_id': 1,
                'hall_name': 'Hall 1',
                'movie_title': 'Dune: Part Two',
                'showtime': '18:00',
                'date': '2025-11-20',
                'total_seats': 77,
                'available_seats': 75,
                'reserved_seats': 2,
                'seats': [{'row': 'A', 'number': 1, 'is_reserved': True, 'price': 20}],
            }
        },
    }

    hall_id: int
    hall_name: str
    movie_title: str
    showtime: str
    date: date
    total_seats: int
    available_seats: int
    reserved_seats: int
    seats: List[SeatAvailabilityResponse]


class SeatCheckRequest(BaseModel):
    showtime: str
    date: date
    seats: List[SeatSchema] = Field(min_length=1)

    model_config = {
        'json_schema_extra': {
            'example': {
                'showtime': '18:00',
                'date': '2025-11-20',
                'seats': [{'row': 'A', 'number': 1}, {'row': 'H', 'number': 3}],
            }
        }
    }


class SeatCheckResponse(BaseModel):
    model_config = {'from_attributes': True}

    row: str
    number: int
    status: str  # available / reserved / not_found
    price: Optional[int] = None


class SeatCheckReportResponse(BaseModel):
    model_config = {'from_attributes': True}

    hall_id: int
    hall_name: str
    movie_title: str
    showtime: str
    date: date
    requested_seats: List[SeatCheckResponse]


class ShowtimeAvailabilityResponse(BaseModel):
    model_config = {'from_attributes': True}

    hall_id: int
    hall_name: str
    movie_title: str
    time: str
    total_seats: int
    available_seats: int
    reserved_seats: int


class ShowtimeScheduleResponse(BaseModel):
    model_config = {'from_attributes': True}

    title: str
    date: date
    showtimes: List[ShowtimeAvailabilityResponse]
