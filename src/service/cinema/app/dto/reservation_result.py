"""Results returned by reservation commands."""

from typing import List
from uuid import UUID

import attrs

from src.service.cinema.domain.entity.reservation_entity import Reservation


@attrs.define(frozen=True)
class ReservationCheckout:
    """A pending reservation plus what the client needs to complete payment"""

    reservation: Reservation
    payment_reference: str
    client_secret: str = attrs.field(repr=False)


@attrs.define(frozen=True)
class RefundSummary:
    reservation_id: UUID
    original_amount: int
    refund_amount: int
    fee: int
    refund_id: str
    refund_status: str
    currency: str


@attrs.define(frozen=True)
class SweepResult:
    released_holds: List[UUID] = attrs.field(factory=list)
    expired_count: int = 0
