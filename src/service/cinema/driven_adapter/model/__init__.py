"""ORM models, imported together so relationship strings resolve and Alembic sees every table"""

from src.service.cinema.driven_adapter.model.hall_model import HallModel, HallSeatModel
from src.service.cinema.driven_adapter.model.movie_model import MovieModel
from src.service.cinema.driven_adapter.model.reservation_model import (
    ReservationModel,
    ReservationSeatModel,
)

__all__ = [
    'HallModel',
    'HallSeatModel',
    'MovieModel',
    'ReservationModel',
    'ReservationSeatModel',
]
