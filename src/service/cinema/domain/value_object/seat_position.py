"""
Seat Position Value Object

A seat is identified by its row label and its number inside the row.
Two positions are the same seat when both fields are equal.
"""

from typing import Any, Iterable

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.define(frozen=True, order=True)
class SeatPosition:
    """Seat Position (Value Object)"""

    row: str
    number: int

    @property
    def seat_id(self) -> str:
        """Seat identifier, e.g. `A-7`"""
        return f'{self.row}-{self.number}'

    def __str__(self) -> str:
        return self.seat_id

    @classmethod
    def of(cls, raw: Any) -> 'SeatPosition':
        """
        Normalize a client seat entry to a position.

        Accepts `SeatPosition`, `{"row": "A", "number": 1}` (number may be a numeric
        string) or an `A-1` seat id. Row labels are upper-cased.
        """
        if isinstance(raw, SeatPosition):
            return raw
        if isinstance(raw, str):
            row, sep, number = raw.rpartition('-')
        elif isinstance(raw, dict):
            row, sep, number = raw.get('row'), '-', raw.get('number')
        else:
            row = getattr(raw, 'row', None)
            number = getattr(raw, 'number', None)
            sep = '-'

        if not sep or row is None or number is None or isinstance(number, bool):
            raise DomainError(f'Invalid seat: {raw!r}. Expected row and number, e.g. A-1')

        row_label = str(row).strip().upper()
        try:
            seat_number = int(number)
        except (TypeError, ValueError):
            raise DomainError(f'Invalid seat number in {raw!r}')

        if not row_label:
            raise DomainError(f'Seat row is required: {raw!r}')
        if seat_number <= 0:
            raise DomainError(f'Seat number must be positive: {raw!r}')
        return cls(row=row_label, number=seat_number)

    @classmethod
    def normalize_many(cls, raw_seats: Iterable[Any]) -> list['SeatPosition']:
        """Normalize a seat list, rejecting empty lists and repeated seats"""
        positions = [cls.of(raw) for raw in raw_seats]
        if not positions:
            raise DomainError('At least one seat must be selected')

        seen: set[SeatPosition] = set()
        duplicates = []
        for position in positions:
            if position in seen:
                duplicates.append(position.seat_id)
            seen.add(position)
        if duplicates:
            raise DomainError(f'Duplicate seats in request: {", ".join(duplicates)}')
        return positions
