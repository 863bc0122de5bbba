from datetime import date
from typing import Any, Iterable, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.dto.availability import (
    UNKNOWN_MOVIE,
    SeatCheckReport,
    ShowtimeSeatMap,
)
from src.service.cinema.app.interface.i_hall_repo import IHallQueryRepo
from src.service.cinema.app.interface.i_movie_query_repo import IMovieQueryRepo
from src.service.cinema.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.cinema.domain.entity.hall_entity import Hall
from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.value_object.reservation_policy import ReservationPolicy
from src.service.cinema.domain.value_object.screening import Screening
from src.service.cinema.domain.value_object.seat_position import SeatPosition


class GetSeatAvailabilityUseCase:
    """
    Held-vs-free seat map of one screening (hall, showtime, local date).

    Pending and reserved reservations both hold their seats. Read-only, nothing
    is cached between requests.
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

    async def _get_hall(self, hall_id: int) -> Hall:
        hall = await self.hall_query_repo.get_by_id(hall_id=hall_id)
        if not hall:
            raise NotFoundError('Hall not found')
        return hall

    async def _held_seats(self, screening: Screening) -> tuple[set[SeatPosition], List[Reservation]]:
        active = await self.reservation_query_repo.list_active_for_screening(screening=screening)
        return {seat for reservation in active for seat in reservation.seats}, active

    async def _resolve_movie_title(
        self, *, screening: Screening, active: List[Reservation]
    ) -> str:
        """Movie booked for the screening, else the hall's movie scheduled at that time"""
        if active:
            movies = await self.movie_query_repo.list_by_ids(movie_ids=[active[0].movie_id])
            if movies:
                return movies[0].title

        movies = await self.movie_query_repo.list_by_hall(hall_id=screening.hall_id)
        for movie in movies:
            if screening.showtime in movie.showtime_tokens_on(screening.show_date, self.policy.tz):
                return movie.title
        in_theaters = [movie for movie in movies if movie.in_theaters]
        return in_theaters[0].title if in_theaters else UNKNOWN_MOVIE

    def _seat_map(
        self,
        *,
        hall: Hall,
        screening: Screening,
        held: set[SeatPosition],
        movie_title: str,
    ) -> ShowtimeSeatMap:
        seats = hall.seat_map(held)
        reserved = sum(1 for seat in seats if seat.is_reserved)
        return ShowtimeSeatMap(
            hall_id=screening.hall_id,
            hall_name=hall.name,
            movie_title=movie_title,
            showtime=screening.showtime,
            date=screening.show_date,
            total_seats=len(seats),
            available_seats=len(seats) - reserved,
            reserved_seats=reserved,
            seats=seats,
        )

    @Logger.io(truncate_content=True)
    async def by_hall(self, *, hall_id: int, showtime: str, show_date: date) -> ShowtimeSeatMap:
        hall = await self._get_hall(hall_id)
        screening = Screening.of(
            hall_id=hall_id, showtime=showtime, show_date=show_date, tz=self.policy.tz
        )
        held, active = await self._held_seats(screening)
        movie_title = await self._resolve_movie_title(screening=screening, active=active)
        return self._seat_map(hall=hall, screening=screening, held=held, movie_title=movie_title)

    @Logger.io(truncate_content=True)
    async def by_movie(self, *, movie_id: int, showtime: str, show_date: date) -> ShowtimeSeatMap:
        movie = await self.movie_query_repo.get_by_id(movie_id=movie_id)
        if not movie:
            raise NotFoundError('Movie not found')
        if movie.hall_id is None:
            raise DomainError(f'Movie "{movie.title}" is not assigned to a hall')

        hall = await self._get_hall(movie.hall_id)
        screening = Screening.of(
            hall_id=movie.hall_id, showtime=showtime, show_date=show_date, tz=self.policy.tz
        )
        held, _ = await self._held_seats(screening)
        return self._seat_map(hall=hall, screening=screening, held=held, movie_title=movie.title)

    @Logger.io
    async def check_seats(
        self, *, hall_id: int, showtime: str, show_date: date, seats: Iterable[Any]
    ) -> SeatCheckReport:
        """Map requested seats onto available / reserved / not_found"""
        requested = [SeatPosition.of(seat) for seat in seats]
        if not requested:
            raise DomainError('At least one seat must be provided')

        hall = await self._get_hall(hall_id)
        screening = Screening.of(
            hall_id=hall_id, showtime=showtime, show_date=show_date, tz=self.policy.tz
        )
        held, active = await self._held_seats(screening)
        return SeatCheckReport(
            hall_id=hall_id,
            hall_name=hall.name,
            movie_title=await self._resolve_movie_title(screening=screening, active=active),
            showtime=screening.showtime,
            date=show_date,
            requested_seats=hall.check_seats(requested, held),
        )
