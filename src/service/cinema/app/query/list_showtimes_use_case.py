from collections import defaultdict
from datetime import date
from typing import Callable, Dict, List, Self, Tuple

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.availability import (
    UNKNOWN_MOVIE,
    ShowtimeAvailability,
    ShowtimeSchedule,
)
from src.service.cinema.app.interface.i_hall_repo import IHallQueryRepo
from src.service.cinema.app.interface.i_movie_query_repo import IMovieQueryRepo
from src.service.cinema.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.value_object.reservation_policy import ReservationPolicy
from src.service.cinema.domain.value_object.screening import day_window
from src.service.cinema.domain.value_object.seat_position import SeatPosition


def _held_by_key(
    reservations: List[Reservation], key: Callable[[Reservation], Tuple]
) -> Dict[Tuple, set[SeatPosition]]:
    held: Dict[Tuple, set[SeatPosition]] = defaultdict(set)
    for reservation in reservations:
        held[key(reservation)].update(reservation.seats)
    return held


class ListShowtimesUseCase:
    """
    Showtimes of a hall or of a movie on a local date, with seat counts per screening.

    Screenings come from the movies' schedules plus any screening that already
    has active reservations, so booked showtimes never disappear from the list.
    """

    def __init__(
        self,
        *,
        reservation_query_repo: IReservationQueryRepo,
        hall_query_repo: IHallQueryRepo,
        movie_query_repo: IMovieQueryRepo,
        policy: ReservationPolicy,
    ) -> None:
        self.reservation_query_repo = reservation_query_repo
        self.hall_query_repo = hall_query_repo
        self.movie_query_repo = movie_query_repo
        self.policy = policy

    @classmethod
    @inject
    def depends(
        cls,
        reservation_query_repo: IReservationQueryRepo = Depends(
            Provide[Container.reservation_query_repo]
        ),
        hall_query_repo: IHallQueryRepo = Depends(Provide[Container.hall_query_repo]),
        movie_query_repo: IMovieQueryRepo = Depends(Provide[Container.movie_query_repo]),
        policy: ReservationPolicy = Depends(Provide[Container.reservation_policy]),
    ) -> Self:
        return cls(
            reservation_query_repo=reservation_query_repo,
            hall_query_repo=hall_query_repo,
            movie_query_repo=movie_query_repo,
            policy=policy,
        )

    @Logger.io(truncate_content=True)
    async def for_hall(self, *, hall_id: int, show_date: date) -> ShowtimeSchedule:
        """Sorted by time"""
        hall = await self.hall_query_repo.get_by_id(hall_id=hall_id)
        if not hall:
            raise NotFoundError('Hall not found')

        window_start, window_end = day_window(show_date, self.policy.tz)
        active = await self.reservation_query_repo.list_active_in_window(
            window_start=window_start, window_end=window_end, hall_id=hall_id
        )
        held = _held_by_key(active, lambda r: (r.showtime, r.movie_id))

        scheduled = await self.movie_query_repo.list_by_hall(hall_id=hall_id)
        screenings = set(held)
        for movie in scheduled:
            for token in movie.showtime_tokens_on(show_date, self.policy.tz):
                screenings.add((token, movie.id))

        movie_ids = sorted({movie_id for _, movie_id in screenings if movie_id is not None})
        titles = {
            movie.id: movie.title
            for movie in await self.movie_query_repo.list_by_ids(movie_ids=movie_ids)
        }

        showtimes = []
        for showtime, movie_id in sorted(screenings, key=lambda s: (s[0], s[1] or 0)):
            reserved = len(held.get((showtime, movie_id), ()))
            showtimes.append(
                ShowtimeAvailability(
                    hall_id=hall_id,
                    hall_name=hall.name,
                    movie_title=titles.get(movie_id, UNKNOWN_MOVIE),
                    time=showtime,
                    total_seats=hall.total_seats,
                    available_seats=hall.total_seats - reserved,
                    reserved_seats=reserved,
                )
            )
        return ShowtimeSchedule(title=hall.name, date=show_date, showtimes=showtimes)

    @Logger.io(truncate_content=True)
    async def for_movie(self, *, movie_id: int, show_date: date) -> ShowtimeSchedule:
        """Sorted by hall name, then time"""
        movie = await self.movie_query_repo.get_by_id(movie_id=movie_id)
        if not movie:
            raise NotFoundError('Movie not found')

        window_start, window_end = day_window(show_date, self.policy.tz)
        active = await self.reservation_query_repo.list_active_in_window(
            window_start=window_start, window_end=window_end, movie_id=movie_id
        )
        held = _held_by_key(active, lambda r: (r.hall_id, r.showtime))

        screenings = set(held)
        if movie.hall_id is not None:
            for token in movie.showtime_tokens_on(show_date, self.policy.tz):
                screenings.add((movie.hall_id, token))

        halls = {
            hall.id: hall
            for hall in await self.hall_query_repo.list_by_ids(
                hall_ids=sorted({hall_id for hall_id, _ in screenings})
            )
        }

        showtimes = []
        for hall_id, showtime in screenings:
            hall = halls.get(hall_id)
            if hall is None:
                Logger.base.warning(f'⚠️ [SHOWTIMES] Hall {hall_id} of movie {movie_id} is gone')
                continue
            reserved = len(held.get((hall_id, showtime), ()))
            showtimes.append(
                ShowtimeAvailability(
                    hall_id=hall_id,
                    hall_name=hall.name,
                    movie_title=movie.title,
                    time=showtime,
                    total_seats=hall.total_seats,
                    available_seats=hall.total_seats - reserved,
                    reserved_seats=reserved,
                )
            )
        showtimes.sort(key=lambda s: (s.hall_name, s.time))
        return ShowtimeSchedule(title=movie.title, date=show_date, showtimes=showtimes)
