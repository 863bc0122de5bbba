from typing import List

from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.interface.i_hall_repo import IHallCommandRepo
from src.service.cinema.domain.entity.hall_entity import Hall


class SeedHallsUseCase:
    """Create `Hall 1..N`, each with rows A-G x 11 seats. Existing halls are kept unless forced."""

    def __init__(self, *, hall_command_repo: IHallCommandRepo, seat_price: int = 20) -> None:
        self.hall_command_repo = hall_command_repo
        self.seat_price = seat_price

    @Logger.io
    async def execute(self, *, hall_count: int = 6, force: bool = False) -> List[Hall]:
        existing = await self.hall_command_repo.count()
        if existing and not force:
            Logger.base.info(f'🏛️ [SEED] {existing} halls already exist, use force to recreate')
            return []

        if existing:
            # Reservations keep their hall_id, so stale ids simply resolve to "Unknown Hall"
            removed = await self.hall_command_repo.delete_all()
            Logger.base.warning(f'🏛️ [SEED] Removed {removed} existing halls')

        halls = [
            Hall.with_default_layout(name=f'Hall {number}', seat_price=self.seat_price)
            for number in range(1, hall_count + 1)
        ]
        created = await self.hall_command_repo.create_many(halls=halls)
        Logger.base.info(
            f'🏛️ [SEED] Created {len(created)} halls with {created[0].total_seats if created else 0} seats each'
        )
        return created
