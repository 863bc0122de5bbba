"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.cinema.app.command import (
    cancel_reservation_use_case,
    confirm_reservation_use_case,
    create_reservation_use_case,
    delete_reservation_use_case,
)
from src.service.cinema.app.query import (
    get_seat_availability_use_case,
    list_my_reservations_use_case,
    list_reservations_use_case,
    list_showtimes_use_case,
)
from src.service.cinema.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_reservation_use_case,
    confirm_reservation_use_case,
    cancel_reservation_use_case,
    delete_reservation_use_case,
    list_my_reservations_use_case,
    list_reservations_use_case,
    get_seat_availability_use_case,
    list_showtimes_use_case,
    role_auth,
]
