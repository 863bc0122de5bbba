from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_movie_query_repo import IMovieQueryRepo
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.driven_adapter.model.movie_model import MovieModel


class MovieQueryRepoImpl(IMovieQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_movie: MovieModel) -> Movie:
        return Movie(
            id=db_movie.id,
            title=db_movie.title,
            duration=db_movie.duration,
            genres=list(db_movie.genres or []),
            hall_id=db_movie.hall_id,
            showtimes=list(db_movie.showtimes or []),
            in_theaters=db_movie.in_theaters,
            created_at=db_movie.created_at,
            updated_at=db_movie.updated_at,
        )

    @Logger.io
    async def get_by_id(self, *, movie_id: int) -> Optional[Movie]:
        async with self.session_factory() as session:
            result = await session.execute(select(MovieModel).where(MovieModel.id == movie_id))
            db_movie = result.scalar_one_or_none()
            return self._to_entity(db_movie) if db_movie else None

    @Logger.io
    async def list_by_ids(self, *, movie_ids: List[int]) -> List[Movie]:
        if not movie_ids:
            return []
        async with self.session_factory() as session:
            result = await session.execute(select(MovieModel).where(MovieModel.id.in_(movie_ids)))
            return [self._to_entity(db_movie) for db_movie in result.scalars().all()]

    @Logger.io
    async def list_by_hall(self, *, hall_id: int) -> List[Movie]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(MovieModel).where(MovieModel.hall_id == hall_id).order_by(MovieModel.id)
            )
            return [self._to_entity(db_movie) for db_movie in result.scalars().all()]
