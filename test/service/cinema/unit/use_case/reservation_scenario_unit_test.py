"""
Scenario: one customer books, pays, and cancels two seats for an evening screening

Screening 2025-11-20 18:00 UTC in Hall 1 ($20 seats), booked two days ahead.
"""

import pytest

from src.service.cinema.app.command.cancel_reservation_use_case import CancelReservationUseCase
from src.service.cinema.app.command.confirm_reservation_use_case import (
    ConfirmReservationUseCase,
)
from src.service.cinema.app.command.create_reservation_use_case import CreateReservationUseCase
from src.service.cinema.app.query.get_seat_availability_use_case import (
    GetSeatAvailabilityUseCase,
)
from src.service.cinema.domain.entity.user_entity import UserEntity
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.reservation_policy import ReservationPolicy
from test.service.cinema.fakes import (
    SCREENING_DATE,
    FakeHallQueryRepo,
    FakeMovieQueryRepo,
    FakePaymentGateway,
    FakeReservationQueryRepo,
    InMemoryReservationStore,
)


CUSTOMER = UserEntity(id=7, email='customer@example.com')


@pytest.mark.unit
@pytest.mark.asyncio
async def test_book_pay_and_cancel_two_seats(
    create_use_case: CreateReservationUseCase,
    confirm_use_case: ConfirmReservationUseCase,
    cancel_use_case: CancelReservationUseCase,
    payment_gateway: FakePaymentGateway,
    store: InMemoryReservationStore,
    policy: ReservationPolicy,
) -> None:
    """
    Given: Seats A1 and A2 are free for the 18:00 screening
    When: The customer books them, pays, confirms, then cancels more than a day ahead
    Then: 4000 is charged, the seats are held while reserved, and the full 4000 is refunded
    """
    seat_availability = GetSeatAvailabilityUseCase(
        reservation_query_repo=FakeReservationQueryRepo(store),
        hall_query_repo=FakeHallQueryRepo(store.halls),
        movie_query_repo=FakeMovieQueryRepo(store.movies),
        policy=policy,
    )

    checkout = await create_use_case.execute(
        user_id=CUSTOMER.id,
        movie_id=1,
        hall_id=1,
        showtime='18:00',
        show_date=SCREENING_DATE,
        seats=[{'row': 'A', 'number': 1}, {'row': 'A', 'number': 2}],
    )
    assert checkout.reservation.amount == 4000
    assert checkout.reservation.status == ReservationStatus.PENDING

    payment_gateway.succeed(checkout.payment_reference)
    confirmed = await confirm_use_case.execute(
        payment_reference=checkout.payment_reference, user_id=CUSTOMER.id
    )
    assert confirmed['status'] == 'reserved'

    seat_map = await seat_availability.by_hall(
        hall_id=1, showtime='18:00', show_date=SCREENING_DATE
    )
    assert seat_map.reserved_seats == 2
    assert seat_map.available_seats == 75

    summary = await cancel_use_case.execute(reservation_id=confirmed['id'], requester=CUSTOMER)
    assert summary.refund_amount == 4000
    assert summary.fee == 0
    assert store.get(confirmed['id']).status == ReservationStatus.CANCELLED

    seat_map = await seat_availability.by_hall(
        hall_id=1, showtime='18:00', show_date=SCREENING_DATE
    )
    assert seat_map.reserved_seats == 0
