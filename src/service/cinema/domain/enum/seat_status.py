from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    RESERVED = 'reserved'
    NOT_FOUND = 'not_found'
