from datetime import datetime
from typing import List, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.cinema.domain.enum.reservation_status import ACTIVE_STATUSES, ReservationStatus
from src.service.cinema.domain.value_object.reservation_policy import (
    RefundQuote,
    ReservationPolicy,
)
from src.service.cinema.domain.value_object.seat_position import SeatPosition


@attrs.define
class Reservation:
    id: UUID
    user_id: int
    movie_id: int
    hall_id: int
    showtime: str
    showtime_date: datetime
    seats: List[SeatPosition]
    amount: int  # Minor currency units, fixed at creation
    currency: str = 'usd'
    status: ReservationStatus = ReservationStatus.PENDING
    payment_reference: Optional[str] = None
    refund_reference: Optional[str] = None
    refund_amount: Optional[int] = None
    refunded_at: Optional[datetime] = None
    hold_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        user_id: int,
        movie_id: int,
        hall_id: int,
        showtime: str,
        showtime_date: datetime,
        seats: List[SeatPosition],
        amount: int,
        now: datetime,
        policy: ReservationPolicy,
        payment_reference: Optional[str] = None,
    ) -> 'Reservation':
        if not seats:
            raise DomainError('At least one seat must be selected')
        if len(set(seats)) != len(seats):
            raise DomainError('Each seat can only be reserved once per reservation')
        if amount <= 0:
            raise DomainError('Reservation amount must be positive')
        if showtime_date <= now:
            raise DomainError('Showtime has already passed')

        return cls(
            id=id,
            user_id=user_id,
            movie_id=movie_id,
            hall_id=hall_id,
            showtime=showtime,
            showtime_date=showtime_date,
            seats=list(seats),
            amount=amount,
            currency=policy.currency,
            status=ReservationStatus.PENDING,
            payment_reference=payment_reference,
            hold_expires_at=now + policy.hold_duration,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def attach_payment(self, *, payment_reference: str) -> 'Reservation':
        if self.status != ReservationStatus.PENDING:
            raise DomainError('Payment can only be attached to a pending reservation')
        return attrs.evolve(self, payment_reference=payment_reference)

    @Logger.io
    def confirm(self, *, now: datetime) -> 'Reservation':
        """pending -> reserved, once the external payment has succeeded"""
        if self.status != ReservationStatus.PENDING:
            raise DomainError(f'Only pending reservations can be confirmed (status: {self.status})')
        return attrs.evolve(
            self, status=ReservationStatus.RESERVED, hold_expires_at=None, updated_at=now
        )

    def cancellation_deadline(self, policy: ReservationPolicy) -> datetime:
        return self.showtime_date - policy.cancellation_cutoff

    @Logger.io
    def quote_refund(self, *, now: datetime, policy: ReservationPolicy) -> RefundQuote:
        """
        Validate that the reservation can be cancelled now and price the refund.

        Raises:
            DomainError: wrong status, or the cancellation window has closed
        """
        if self.status == ReservationStatus.PENDING:
            raise DomainError('Pending reservations cannot be cancelled, payment is not confirmed')
        elif self.status == ReservationStatus.CANCELLED:
            raise DomainError('Reservation is already cancelled')
        elif self.status == ReservationStatus.EXPIRED:
            raise DomainError('Reservation has expired, the showtime has passed')

        deadline = self.cancellation_deadline(policy)
        if now >= deadline:
            cutoff_minutes = int(policy.cancellation_cutoff.total_seconds() // 60)
            raise DomainError(
                f'Cancellation window closed at {deadline.isoformat()} '
                f'({cutoff_minutes} minutes before showtime)'
            )
        if not self.payment_reference:
            raise DomainError('Reservation has no payment to refund')

        return RefundQuote.compute(
            amount=self.amount, showtime_date=self.showtime_date, now=now, policy=policy
        )

    @Logger.io
    def cancel_with_refund(
        self, *, refund_reference: str, refund_amount: int, now: datetime
    ) -> 'Reservation':
        if self.status != ReservationStatus.RESERVED:
            raise DomainError(f'Only reserved reservations can be cancelled (status: {self.status})')
        return attrs.evolve(
            self,
            status=ReservationStatus.CANCELLED,
            refund_reference=refund_reference,
            refund_amount=refund_amount,
            refunded_at=now,
            updated_at=now,
        )

    def is_hold_expired(self, *, now: datetime) -> bool:
        return (
            self.status == ReservationStatus.PENDING
            and self.hold_expires_at is not None
            and self.hold_expires_at <= now
        )

    @Logger.io
    def release_hold(self, *, now: datetime) -> 'Reservation':
        """pending -> cancelled when the payment window ran out"""
        if not self.is_hold_expired(now=now):
            raise DomainError('Reservation hold is still running or no longer pending')
        return attrs.evolve(
            self, status=ReservationStatus.CANCELLED, hold_expires_at=None, updated_at=now
        )

    def is_past_showtime(self, *, now: datetime) -> bool:
        return self.status == ReservationStatus.RESERVED and self.showtime_date < now

    def expire(self, *, now: datetime) -> 'Reservation':
        """reserved -> expired once the showtime is in the past"""
        if not self.is_past_showtime(now=now):
            raise DomainError('Only reserved reservations with a past showtime can expire')
        return attrs.evolve(self, status=ReservationStatus.EXPIRED, updated_at=now)
