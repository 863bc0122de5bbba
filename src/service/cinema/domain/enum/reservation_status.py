from enum import StrEnum


class ReservationStatus(StrEnum):
    PENDING = 'pending'
    RESERVED = 'reserved'
    CANCELLED = 'cancelled'
    EXPIRED = 'expired'


# Statuses that hold their seats for the screening
ACTIVE_STATUSES: frozenset[ReservationStatus] = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.RESERVED}
)
