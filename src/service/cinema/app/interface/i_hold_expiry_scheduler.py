from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID


class IHoldExpiryScheduler(ABC):
    @abstractmethod
    def schedule(self, *, reservation_id: UUID, due_at: datetime) -> None:
        """Release the hold at `due_at` if the reservation is still pending. Must not block."""
        pass
