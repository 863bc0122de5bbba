"""
API test configuration.

The DI container providers are overridden with the in-memory fakes, so requests
travel through the real routers, auth dependencies, use cases and exception
handlers without a database or Stripe.
"""

from collections.abc import Generator
from datetime import date, timedelta
from typing import Callable

from dependency_injector import providers
from fastapi.testclient import TestClient
import pytest

from src.platform.config.di import container
from src.service.cinema.domain.entity.user_entity import UserEntity, UserRole
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from test.service.cinema.fakes import (
    FakeHallQueryRepo,
    FakeMovieQueryRepo,
    FakePaymentGateway,
    FakeReservationQueryRepo,
    FakeUnitOfWork,
    InMemoryReservationStore,
    RecordingHoldScheduler,
    make_hall,
    make_movie,
    showtime_at,
)
from test.test_main import app


# Route handlers use the real clock, so the screening must stay in the future
SHOW_DATE = date.today() + timedelta(days=30)

USER = UserEntity(id=7, email='user@example.com')
OTHER_USER = UserEntity(id=8, email='other@example.com')
ADMIN = UserEntity(id=1, role=UserRole.ADMIN, email='admin@example.com')


@pytest.fixture
def api_store() -> InMemoryReservationStore:
    return InMemoryReservationStore(
        halls={1: make_hall(), 2: make_hall(hall_id=2, name='Hall 2')},
        movies={
            1: make_movie(
                showtimes=[showtime_at(SHOW_DATE, 18), showtime_at(SHOW_DATE, 21, 30)]
            )
        },
    )


@pytest.fixture
def api_payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def client(
    api_store: InMemoryReservationStore, api_payment_gateway: FakePaymentGateway
) -> Generator[TestClient, None, None]:
    with container.override_providers(
        unit_of_work=providers.Factory(FakeUnitOfWork, api_store),
        reservation_query_repo=providers.Object(FakeReservationQueryRepo(api_store)),
        hall_query_repo=providers.Object(FakeHallQueryRepo(api_store.halls)),
        movie_query_repo=providers.Object(FakeMovieQueryRepo(api_store.movies)),
        payment_gateway=providers.Object(api_payment_gateway),
        hold_expiry_scheduler=providers.Object(RecordingHoldScheduler()),
    ):
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def auth_headers() -> Callable[[UserEntity], dict[str, str]]:
    jwt_auth = JwtAuth()

    def _headers(user: UserEntity) -> dict[str, str]:
        return {'Authorization': f'Bearer {jwt_auth.create_jwt_token(user)}'}

    return _headers
