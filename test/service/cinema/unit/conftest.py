"""
Unit test configuration for the cinema service.

Every use case is built on the in-memory fakes, sharing one store per test so
several units of work can race over the same screening.
"""

from typing import Callable

import pytest

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.cinema.app.command.cancel_reservation_use_case import CancelReservationUseCase
from src.service.cinema.app.command.confirm_reservation_use_case import (
    ConfirmReservationUseCase,
)
from src.service.cinema.app.command.create_reservation_use_case import CreateReservationUseCase
from src.service.cinema.app.command.expire_stale_holds_use_case import ExpireStaleHoldsUseCase
from src.service.cinema.domain.entity.hall_entity import Hall
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.value_object.reservation_policy import ReservationPolicy
from test.service.cinema.fakes import (
    SCREENING_DATE,
    FakeHallQueryRepo,
    FakeMovieQueryRepo,
    FakePaymentGateway,
    FakeUnitOfWork,
    FrozenClock,
    InMemoryReservationStore,
    RecordingHoldScheduler,
    make_hall,
    make_movie,
    showtime_at,
)


@pytest.fixture
def policy() -> ReservationPolicy:
    return ReservationPolicy()


@pytest.fixture
def hall() -> Hall:
    return make_hall()


@pytest.fixture
def movie() -> Movie:
    return make_movie(
        showtimes=[showtime_at(SCREENING_DATE, 18), showtime_at(SCREENING_DATE, 21, 30)]
    )


@pytest.fixture
def store(hall: Hall, movie: Movie) -> InMemoryReservationStore:
    return InMemoryReservationStore(halls={hall.id: hall}, movies={movie.id: movie})


@pytest.fixture
def uow_factory(store: InMemoryReservationStore) -> Callable[[], AbstractUnitOfWork]:
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def hold_scheduler() -> RecordingHoldScheduler:
    return RecordingHoldScheduler()


@pytest.fixture
def make_create_use_case(
    store: InMemoryReservationStore,
    payment_gateway: FakePaymentGateway,
    hold_scheduler: RecordingHoldScheduler,
    policy: ReservationPolicy,
    clock: FrozenClock,
) -> Callable[[], CreateReservationUseCase]:
    """A fresh use case per request, like the request-scoped DI factory"""

    def _make() -> CreateReservationUseCase:
        return CreateReservationUseCase(
            uow=FakeUnitOfWork(store),
            hall_query_repo=FakeHallQueryRepo(store.halls),
            movie_query_repo=FakeMovieQueryRepo(store.movies),
            payment_gateway=payment_gateway,
            hold_scheduler=hold_scheduler,
            policy=policy,
            clock=clock,
        )

    return _make


@pytest.fixture
def create_use_case(
    make_create_use_case: Callable[[], CreateReservationUseCase],
) -> CreateReservationUseCase:
    return make_create_use_case()


@pytest.fixture
def confirm_use_case(
    store: InMemoryReservationStore, payment_gateway: FakePaymentGateway, clock: FrozenClock
) -> ConfirmReservationUseCase:
    return ConfirmReservationUseCase(
        uow=FakeUnitOfWork(store), payment_gateway=payment_gateway, clock=clock
    )


@pytest.fixture
def cancel_use_case(
    store: InMemoryReservationStore,
    payment_gateway: FakePaymentGateway,
    policy: ReservationPolicy,
    clock: FrozenClock,
) -> CancelReservationUseCase:
    return CancelReservationUseCase(
        uow=FakeUnitOfWork(store), payment_gateway=payment_gateway, policy=policy, clock=clock
    )


@pytest.fixture
def expire_use_case(
    uow_factory: Callable[[], AbstractUnitOfWork], clock: FrozenClock
) -> ExpireStaleHoldsUseCase:
    return ExpireStaleHoldsUseCase(uow_factory=uow_factory, clock=clock)
