"""Unit tests for seat positions, screenings and the hall seat layout"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.cinema.domain.entity.hall_entity import Hall, Seat
from src.service.cinema.domain.enum.seat_status import SeatStatus
from src.service.cinema.domain.value_object.screening import (
    Screening,
    combine_showtime,
    day_window,
    normalize_showtime,
)
from src.service.cinema.domain.value_object.seat_position import SeatPosition


UTC = ZoneInfo('UTC')


@pytest.mark.unit
class TestSeatPosition:
    @pytest.mark.parametrize(
        'raw',
        [
            {'row': 'a', 'number': 1},
            {'row': 'A', 'number': '1'},
            'A-1',
            ' a -1',
            SeatPosition(row='A', number=1),
        ],
    )
    def test_normalize_seat_entries(self, raw) -> None:
        assert SeatPosition.of(raw) == SeatPosition(row='A', number=1)

    @pytest.mark.parametrize(
        'raw',
        [
            {'row': 'A'},
            {'row': 'A', 'number': 'x'},
            {'row': 'A', 'number': 0},
            {'row': '', 'number': 1},
            {'row': 'A', 'number': True},
            'A1',
            42,
        ],
    )
    def test_reject_invalid_entries(self, raw) -> None:
        with pytest.raises(DomainError):
            SeatPosition.of(raw)

    def test_seat_id(self) -> None:
        assert SeatPosition(row='B', number=11).seat_id == 'B-11'

    def test_normalize_many_rejects_duplicates_after_normalization(self) -> None:
        """
        Given: `a-1` and {"row": "A", "number": 1}, the same seat written twice
        When: Normalizing the request
        Then: Raises DomainError naming the duplicate
        """
        with pytest.raises(DomainError, match='Duplicate seats in request: A-1'):
            SeatPosition.normalize_many(['a-1', {'row': 'A', 'number': 1}])

    def test_normalize_many_rejects_empty(self) -> None:
        with pytest.raises(DomainError, match='At least one seat'):
            SeatPosition.normalize_many([])


@pytest.mark.unit
class TestShowtimeTokens:
    @pytest.mark.parametrize(('token', 'expected'), [('9:05', '09:05'), ('18:00', '18:00')])
    def test_normalize(self, token: str, expected: str) -> None:
        assert normalize_showtime(token) == expected

    @pytest.mark.parametrize('token', ['24:00', '18:60', '1800', '', 'noon'])
    def test_reject_invalid(self, token: str) -> None:
        with pytest.raises(DomainError, match='Invalid showtime'):
            normalize_showtime(token)

    def test_combine_in_cinema_timezone(self) -> None:
        """
        Given: A cinema in Asia/Taipei (UTC+8)
        When: Combining 2025-11-20 with 18:00
        Then: The instant is 10:00 UTC
        """
        instant = combine_showtime(date(2025, 11, 20), '18:00', ZoneInfo('Asia/Taipei'))

        assert instant == datetime(2025, 11, 20, 10, 0, tzinfo=timezone.utc)

    def test_day_window_covers_the_local_day(self) -> None:
        start, end = day_window(date(2025, 11, 20), UTC)

        assert start == datetime(2025, 11, 20, 0, 0, tzinfo=timezone.utc)
        assert end == datetime(2025, 11, 20, 23, 59, 59, 999000, tzinfo=timezone.utc)


@pytest.mark.unit
class TestScreening:
    def test_screening_scopes_by_hall_token_and_day(self) -> None:
        screening = Screening.of(hall_id=1, showtime='18:00', show_date=date(2025, 11, 20), tz=UTC)
        show = datetime(2025, 11, 20, 18, 0, tzinfo=timezone.utc)

        assert screening.lock_key == '1|18:00|2025-11-20'
        assert screening.contains(hall_id=1, showtime='18:00', showtime_date=show)
        assert not screening.contains(hall_id=2, showtime='18:00', showtime_date=show)
        assert not screening.contains(hall_id=1, showtime='21:00', showtime_date=show)
        assert not screening.contains(
            hall_id=1,
            showtime='18:00',
            showtime_date=datetime(2025, 11, 21, 18, 0, tzinfo=timezone.utc),
        )


@pytest.mark.unit
class TestHall:
    def test_default_layout_has_77_seats(self) -> None:
        hall = Hall.with_default_layout(name='Hall 1')

        assert hall.total_seats == 77
        assert len(hall.seats) == 77
        assert {seat.row for seat in hall.seats} == set('ABCDEFG')
        assert max(seat.number for seat in hall.seats) == 11

    def test_price_is_sum_of_seat_prices_in_minor_units(self) -> None:
        """
        Given: A hall where one seat costs more than the others
        When: Pricing A1 + A2
        Then: Each seat pays its own price
        """
        hall = Hall(
            name='Premium',
            seats=[Seat(row='A', number=1, price=20), Seat(row='A', number=2, price=35)],
        )

        amount = hall.price_in_minor_units(
            [SeatPosition(row='A', number=1), SeatPosition(row='A', number=2)]
        )

        assert amount == 5500

    def test_unknown_seat_is_rejected(self) -> None:
        hall = Hall.with_default_layout(name='Hall 1')

        with pytest.raises(DomainError, match='Seats do not exist in Hall 1: Z-99'):
            hall.validate_seats([SeatPosition(row='Z', number=99)])

    def test_check_seats(self) -> None:
        hall = Hall.with_default_layout(name='Hall 1')
        held = {SeatPosition(row='A', number=1)}

        checks = hall.check_seats(
            [
                SeatPosition(row='A', number=1),
                SeatPosition(row='A', number=2),
                SeatPosition(row='Z', number=99),
            ],
            held,
        )

        assert [check.status for check in checks] == [
            SeatStatus.RESERVED,
            SeatStatus.AVAILABLE,
            SeatStatus.NOT_FOUND,
        ]
        assert checks[2].price is None
        assert checks[1].price == 20
