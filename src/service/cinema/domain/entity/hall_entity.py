from datetime import datetime
from typing import Iterable, List, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.seat_position import SeatPosition


DEFAULT_ROWS = ('A', 'B', 'C', 'D', 'E', 'F', 'G')
DEFAULT_SEATS_PER_ROW = 11


@attrs.define(frozen=True)
class Seat:
    row: str
    number: int
    price: int = 20  # Major currency units

    @property
    def position(self) -> SeatPosition:
        return SeatPosition(row=self.row, number=self.number)


@attrs.define(frozen=True)
class SeatAvailability:
    row: str
    number: int
    is_reserved: bool
    price: int


@attrs.define(frozen=True)
class SeatCheck:
    row: str
    number: int
    status: SeatStatus
    price: Optional[int] = None


@attrs.define
class Hall:
    name: str
    seats: List[Seat] = attrs.field(factory=list)
    total_seats: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    _index: dict[SeatPosition, Seat] = attrs.field(init=False, repr=False, eq=False)

    def __attrs_post_init__(self) -> None:
        self._index = {seat.position: seat for seat in self.seats}
        if not self.total_seats:
            self.total_seats = len(self.seats)

    @classmethod
    def with_default_layout(
        cls,
        *,
        name: str,
        rows: Iterable[str] = DEFAULT_ROWS,
        seats_per_row: int = DEFAULT_SEATS_PER_ROW,
        seat_price: int = 20,
    ) -> 'Hall':
        seats = [
            Seat(row=row, number=number, price=seat_price)
            for row in rows
            for number in range(1, seats_per_row + 1)
        ]
        return cls(name=name, seats=seats, total_seats=len(seats))

    def find_seat(self, position: SeatPosition) -> Optional[Seat]:
        return self._index.get(position)

    def validate_seats(self, positions: Iterable[SeatPosition]) -> List[Seat]:
        seats, missing = [], []
        for position in positions:
            seat = self.find_seat(position)
            if seat is None:
                missing.append(position.seat_id)
            else:
                seats.append(seat)
        if missing:
            raise DomainError(f'Seats do not exist in {self.name}: {", ".join(missing)}')
        return seats

    def price_in_minor_units(self, positions: Iterable[SeatPosition]) -> int:
        """Each seat is charged its own price, converted to minor units"""
        return sum(seat.price for seat in self.validate_seats(positions)) * 100

    def seat_map(self, held: set[SeatPosition]) -> List[SeatAvailability]:
        return [
            SeatAvailability(
                row=seat.row,
                number=seat.number,
                is_reserved=seat.position in held,
                price=seat.price,
            )
            for seat in self.seats
        ]

    def check_seats(
        self, requested: Iterable[SeatPosition], held: set[SeatPosition]
    ) -> List[SeatCheck]:
        checks = []
        for position in requested:
            seat = self.find_seat(position)
            if seat is None:
                checks.append(
                    SeatCheck(row=position.row, number=position.number, status=SeatStatus.NOT_FOUND)
                )
                continue
            checks.append(
                SeatCheck(
                    row=seat.row,
                    number=seat.number,
                    status=SeatStatus.RESERVED if position in held else SeatStatus.AVAILABLE,
                    price=seat.price,
                )
            )
        return checks
