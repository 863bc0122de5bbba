import time
from datetime import date, datetime
from typing import Any, Callable, Iterable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils.compat import uuid7

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    ConflictError,
    NotFoundError,
    PaymentFailedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.cinema.app.dto.reservation_result import ReservationCheckout
from src.service.cinema.app.interface.i_hall_repo import IHallQueryRepo
from src.service.cinema.app.interface.i_hold_expiry_scheduler import IHoldExpiryScheduler
from src.service.cinema.app.interface.i_movie_query_repo import IMovieQueryRepo
from src.service.cinema.app.interface.i_payment_gateway import IPaymentGateway
from src.service.cinema.domain.entity.reservation_entity import Reservation
from src.service.cinema.domain.value_object.reservation_policy import (
    ReservationPolicy,
    utc_now,
)
from src.service.cinema.domain.value_object.screening import Screening, combine_showtime
from src.service.cinema.domain.value_object.seat_position import SeatPosition


class CreateReservationUseCase:
    """
    Create a pending reservation and open its payment.

    Flow:
    1. Validate hall, movie, showtime and seats (nothing is written on failure)
    2. Lock the screening (hall|showtime|date) for the rest of the transaction
    3. Reject seats already held by pending or reserved reservations
    4. Insert the pending reservation and its seat rows
    5. Open the payment intent and store its reference on the reservation
    6. Commit, then schedule the hold check that releases unpaid seats

    The lock makes check-then-insert a critical section per screening, and the
    unique index on reservation seats rejects anything that slips past it.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        hall_query_repo: IHallQueryRepo,
        movie_query_repo: IMovieQueryRepo,
        payment_gateway: IPaymentGateway,
        hold_scheduler: IHoldExpiryScheduler,
        policy: ReservationPolicy,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self.hall_query_repo = hall_query_repo
        self.movie_query_repo = movie_query_repo
        self.payment_gateway = payment_gateway
        self.hold_scheduler = hold_scheduler
        self.policy = policy
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        hall_query_repo: IHallQueryRepo = Depends(Provide[Container.hall_query_repo]),
        movie_query_repo: IMovieQueryRepo = Depends(Provide[Container.movie_query_repo]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        hold_scheduler: IHoldExpiryScheduler = Depends(Provide[Container.hold_expiry_scheduler]),
        policy: ReservationPolicy = Depends(Provide[Container.reservation_policy]),
    ) -> Self:
        return cls(
            uow=uow,
            hall_query_repo=hall_query_repo,
            movie_query_repo=movie_query_repo,
            payment_gateway=payment_gateway,
            hold_scheduler=hold_scheduler,
            policy=policy,
        )

    @Logger.io
    async def execute(
        self,
        *,
        user_id: int,
        movie_id: int,
        hall_id: int,
        showtime: str,
        show_date: date,
        seats: Iterable[Any],
    ) -> ReservationCheckout:
        """
        Raises:
            DomainError: invalid seats/showtime, or the showtime has already passed
            NotFoundError: hall or movie does not exist
            ConflictError: one of the seats is already held for the screening
            PaymentFailedError: the payment intent could not be opened
        """
        started = time.perf_counter()
        positions = SeatPosition.normalize_many(seats)

        hall = await self.hall_query_repo.get_by_id(hall_id=hall_id)
        if not hall:
            raise NotFoundError('Hall not found')
        movie = await self.movie_query_repo.get_by_id(movie_id=movie_id)
        if not movie:
            raise NotFoundError('Movie not found')

        screening = Screening.of(
            hall_id=hall_id, showtime=showtime, show_date=show_date, tz=self.policy.tz
        )
        showtime_date = combine_showtime(show_date, screening.showtime, self.policy.tz)
        amount = hall.price_in_minor_units(positions)

        reservation = Reservation.create(
            id=uuid7(),
            user_id=user_id,
            movie_id=movie_id,
            hall_id=hall_id,
            showtime=screening.showtime,
            showtime_date=showtime_date,
            seats=positions,
            amount=amount,
            now=self.clock(),
            policy=self.policy,
        )

        try:
            async with self.uow:
                await self.uow.reservation_command_repo.lock_screening(screening=screening)

                active = await self.uow.reservation_query_repo.list_active_for_screening(
                    screening=screening
                )
                held = {seat for existing in active for seat in existing.seats}
                taken = sorted(position for position in positions if position in held)
                if taken:
                    raise ConflictError(
                        'Seats already reserved for this showtime: '
                        + ', '.join(seat.seat_id for seat in taken)
                    )

                await self.uow.reservation_command_repo.create(
                    reservation=reservation, screening=screening
                )

                payment = await self.payment_gateway.open_payment(
                    reservation_id=str(reservation.id),
                    amount=reservation.amount,
                    currency=reservation.currency,
                    metadata={
                        'user_id': str(user_id),
                        'movie_id': str(movie_id),
                        'hall_id': str(hall_id),
                        'showtime': screening.showtime,
                        'date': show_date.isoformat(),
                        'seats': ','.join(seat.seat_id for seat in positions),
                    },
                )
                reservation = reservation.attach_payment(payment_reference=payment.reference)
                await self.uow.reservation_command_repo.update(reservation=reservation)

                await self.uow.commit()
        except ConflictError:
            metrics.record_reservation_request(
                hall_id=hall_id, result='conflict', duration=time.perf_counter() - started
            )
            raise
        except PaymentFailedError:
            metrics.record_reservation_request(
                hall_id=hall_id, result='payment_failed', duration=time.perf_counter() - started
            )
            raise

        assert reservation.hold_expires_at is not None, 'Pending reservation must carry a hold'
        self.hold_scheduler.schedule(
            reservation_id=reservation.id, due_at=reservation.hold_expires_at
        )

        metrics.record_reservation_request(
            hall_id=hall_id, result='created', duration=time.perf_counter() - started
        )
        Logger.base.info(
            f'🎟️ [CREATE-RESERVATION] {reservation.id} user={user_id} '
            f'screening={screening.lock_key} seats={[seat.seat_id for seat in positions]}'
        )
        return ReservationCheckout(
            reservation=reservation,
            payment_reference=payment.reference,
            client_secret=payment.client_secret,
        )
