"""Seat availability read models."""

from datetime import date
from typing import List

import attrs

from src.service.cinema.domain.entity.hall_entity import SeatAvailability, SeatCheck


UNKNOWN_MOVIE = 'Unknown'


@attrs.define(frozen=True)
class ShowtimeSeatMap:
    hall_id: int
    hall_name: str
    movie_title: str
    showtime: str
    date: date
    total_seats: int
    available_seats: int
    reserved_seats: int
    seats: List[SeatAvailability]


@attrs.define(frozen=True)
class SeatCheckReport:
    hall_id: int
    hall_name: str
    movie_title: str
    showtime: str
    date: date
    requested_seats: List[SeatCheck]


@attrs.define(frozen=True)
class ShowtimeAvailability:
    hall_id: int
    hall_name: str
    movie_title: str
    time: str
    total_seats: int
    available_seats: int
    reserved_seats: int


@attrs.define(frozen=True)
class ShowtimeSchedule:
    """Showtimes of one hall or one movie on a date"""

    title: str  # Hall name or movie title
    date: date
    showtimes: List[ShowtimeAvailability]
