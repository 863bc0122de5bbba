from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.cinema.domain.entity.hall_entity import Hall


class IHallQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, hall_id: int) -> Optional[Hall]:
        pass

    @abstractmethod
    async def list_by_ids(self, *, hall_ids: List[int]) -> List[Hall]:
        pass


class IHallCommandRepo(ABC):
    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        pass

    @abstractmethod
    async def create_many(self, *, halls: List[Hall]) -> List[Hall]:
        pass
