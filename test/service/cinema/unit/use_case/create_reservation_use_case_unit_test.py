"""
Unit tests for CreateReservationUseCase

Tests the hold flow:
1. Validation before anything is written
2. Per-screening conflict detection (pending and reserved both hold seats)
3. Payment intent opened inside the transaction
4. Hold timer scheduled only after commit
"""

import asyncio
from datetime import date, timedelta
from typing import Callable

import pytest

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    PaymentFailedError,
)
from src.service.cinema.app.command.create_reservation_use_case import CreateReservationUseCase
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.domain.value_object.seat_position import SeatPosition
from test.service.cinema.fakes import (
    SCREENING_AT,
    SCREENING_DATE,
    FakePaymentGateway,
    FrozenClock,
    InMemoryReservationStore,
    RecordingHoldScheduler,
    make_reservation,
)


A1_A2 = [{'row': 'A', 'number': 1}, {'row': 'A', 'number': 2}]


def _request(**overrides) -> dict:
    params = {
        'user_id': 7,
        'movie_id': 1,
        'hall_id': 1,
        'showtime': '18:00',
        'show_date': SCREENING_DATE,
        'seats': A1_A2,
    }
    params.update(overrides)
    return params


@pytest.mark.unit
class TestCreateReservationUseCase:
    @pytest.mark.asyncio
    async def test_create_pending_reservation_with_payment(
        self,
        create_use_case: CreateReservationUseCase,
        store: InMemoryReservationStore,
        payment_gateway: FakePaymentGateway,
        hold_scheduler: RecordingHoldScheduler,
        clock: FrozenClock,
    ) -> None:
        """
        Given: Hall 1 with $20 seats and nothing booked
        When: User 7 reserves A1 and A2 for 2025-11-20 18:00
        Then: A pending 4000-cent reservation is stored with its payment reference
        """
        # When
        checkout = await create_use_case.execute(**_request())

        # Then
        reservation = checkout.reservation
        assert reservation.status == ReservationStatus.PENDING
        assert reservation.amount == 4000
        assert reservation.currency == 'usd'
        assert reservation.showtime_date == SCREENING_AT
        assert reservation.seats == [
            SeatPosition(row='A', number=1),
            SeatPosition(row='A', number=2),
        ]
        assert reservation.hold_expires_at == clock() + timedelta(minutes=15)
        assert checkout.payment_reference == reservation.payment_reference
        assert checkout.client_secret == f'{checkout.payment_reference}_secret'

        # Persisted
        stored = store.get(reservation.id)
        assert stored is not None
        assert stored.payment_reference == checkout.payment_reference

        # Payment opened for the reservation amount
        intent = payment_gateway.intents[checkout.payment_reference]
        assert intent['amount'] == 4000
        assert intent['reservation_id'] == str(reservation.id)
        assert intent['metadata']['seats'] == 'A-1,A-2'

        # Hold timer scheduled at the hold deadline
        assert hold_scheduler.scheduled == [(reservation.id, reservation.hold_expires_at)]

    @pytest.mark.asyncio
    async def test_showtime_token_is_normalized(
        self, create_use_case: CreateReservationUseCase
    ) -> None:
        checkout = await create_use_case.execute(**_request(showtime='9:05'))

        assert checkout.reservation.showtime == '09:05'

    @pytest.mark.asyncio
    async def test_conflict_with_reserved_seats(
        self,
        create_use_case: CreateReservationUseCase,
        store: InMemoryReservationStore,
        payment_gateway: FakePaymentGateway,
    ) -> None:
        """
        Given: A1 is already reserved for the screening
        When: Another user requests A1 and A3
        Then: ConflictError names A-1 and no payment is opened
        """
        store.add(make_reservation(user_id=8, seats=[SeatPosition(row='A', number=1)]))

        with pytest.raises(ConflictError, match='A-1'):
            await create_use_case.execute(
                **_request(seats=[{'row': 'A', 'number': 1}, {'row': 'A', 'number': 3}])
            )

        assert payment_gateway.intents == {}
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_pending_reservation_also_holds_seats(
        self, create_use_case: CreateReservationUseCase, store: InMemoryReservationStore, clock
    ) -> None:
        store.add(
            make_reservation(
                user_id=8,
                status=ReservationStatus.PENDING,
                hold_expires_at=clock() + timedelta(minutes=10),
            )
        )

        with pytest.raises(ConflictError):
            await create_use_case.execute(**_request())

    @pytest.mark.asyncio
    @pytest.mark.parametrize('status', [ReservationStatus.CANCELLED, ReservationStatus.EXPIRED])
    async def test_inactive_reservations_free_their_seats(
        self,
        create_use_case: CreateReservationUseCase,
        store: InMemoryReservationStore,
        status: ReservationStatus,
    ) -> None:
        store.add(make_reservation(user_id=8, status=status))

        checkout = await create_use_case.execute(**_request())

        assert checkout.reservation.status == ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_other_showtime_does_not_conflict(
        self, create_use_case: CreateReservationUseCase, store: InMemoryReservationStore
    ) -> None:
        """
        Given: A1 and A2 reserved for 18:00
        When: Reserving the same seats for 21:30 the same day
        Then: The reservation is created
        """
        store.add(make_reservation(user_id=8))

        checkout = await create_use_case.execute(**_request(showtime='21:30'))

        assert checkout.reservation.showtime == '21:30'

    @pytest.mark.asyncio
    async def test_other_day_does_not_conflict(
        self, create_use_case: CreateReservationUseCase, store: InMemoryReservationStore
    ) -> None:
        store.add(make_reservation(user_id=8))

        checkout = await create_use_case.execute(**_request(show_date=date(2025, 11, 21)))

        assert checkout.reservation.showtime_date.date() == date(2025, 11, 21)

    @pytest.mark.asyncio
    async def test_concurrent_requests_for_same_seat(
        self,
        make_create_use_case: Callable[[], CreateReservationUseCase],
        store: InMemoryReservationStore,
    ) -> None:
        """
        Given: Two users racing for A1 of the same screening
        When: Both requests run concurrently
        Then: Exactly one succeeds and the other gets a conflict
        """
        results = await asyncio.gather(
            make_create_use_case().execute(**_request(user_id=1, seats=['A-1'])),
            make_create_use_case().execute(**_request(user_id=2, seats=['A-1'])),
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(created) == 1
        assert len(conflicts) == 1
        assert len(store.rows) == 1

    @pytest.mark.asyncio
    async def test_payment_failure_leaves_nothing_behind(
        self,
        create_use_case: CreateReservationUseCase,
        store: InMemoryReservationStore,
        payment_gateway: FakePaymentGateway,
        hold_scheduler: RecordingHoldScheduler,
    ) -> None:
        """
        Given: The payment processor rejects the intent
        When: Creating a reservation
        Then: PaymentFailedError propagates, no row is stored and no timer scheduled
        """
        payment_gateway.fail_open = True

        with pytest.raises(PaymentFailedError):
            await create_use_case.execute(**_request())

        assert store.rows == {}
        assert hold_scheduler.scheduled == []

    @pytest.mark.asyncio
    async def test_seats_free_again_after_payment_failure(
        self,
        make_create_use_case: Callable[[], CreateReservationUseCase],
        payment_gateway: FakePaymentGateway,
    ) -> None:
        payment_gateway.fail_open = True
        with pytest.raises(PaymentFailedError):
            await make_create_use_case().execute(**_request())

        payment_gateway.fail_open = False
        checkout = await make_create_use_case().execute(**_request())

        assert checkout.reservation.status == ReservationStatus.PENDING

    @pytest.mark.asyncio
    async def test_missing_hall(self, create_use_case: CreateReservationUseCase) -> None:
        with pytest.raises(NotFoundError, match='Hall not found'):
            await create_use_case.execute(**_request(hall_id=99))

    @pytest.mark.asyncio
    async def test_missing_movie(self, create_use_case: CreateReservationUseCase) -> None:
        with pytest.raises(NotFoundError, match='Movie not found'):
            await create_use_case.execute(**_request(movie_id=99))

    @pytest.mark.asyncio
    async def test_unknown_seat(
        self, create_use_case: CreateReservationUseCase, store: InMemoryReservationStore
    ) -> None:
        with pytest.raises(DomainError, match='Z-99'):
            await create_use_case.execute(**_request(seats=['Z-99']))

        assert store.rows == {}

    @pytest.mark.asyncio
    async def test_duplicate_seats(self, create_use_case: CreateReservationUseCase) -> None:
        with pytest.raises(DomainError, match='Duplicate seats'):
            await create_use_case.execute(**_request(seats=['A-1', {'row': 'a', 'number': 1}]))

    @pytest.mark.asyncio
    async def test_past_showtime(
        self, create_use_case: CreateReservationUseCase, clock: FrozenClock
    ) -> None:
        clock.set(SCREENING_AT + timedelta(minutes=1))

        with pytest.raises(DomainError, match='already passed'):
            await create_use_case.execute(**_request())

    @pytest.mark.asyncio
    async def test_invalid_showtime(self, create_use_case: CreateReservationUseCase) -> None:
        with pytest.raises(DomainError, match='Invalid showtime'):
            await create_use_case.execute(**_request(showtime='25:00'))
