from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.cinema.domain.entity.movie_entity import Movie


class IMovieQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, movie_id: int) -> Optional[Movie]:
        pass

    @abstractmethod
    async def list_by_ids(self, *, movie_ids: List[int]) -> List[Movie]:
        pass

    @abstractmethod
    async def list_by_hall(self, *, hall_id: int) -> List[Movie]:
        pass
