from typing import Callable

import anyio
from anyio.abc import TaskGroup

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.expire_stale_holds_use_case import ExpireStaleHoldsUseCase
from src.service.cinema.app.dto.reservation_result import SweepResult


class ExpirySweeper:
    """Periodic reconciliation of unpaid holds and past showtimes, backed by the database only"""

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        interval_seconds: float = 60.0,
    ) -> None:
        self._use_case = ExpireStaleHoldsUseCase(uow_factory=uow_factory)
        self._interval_seconds = interval_seconds

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)  # pyrefly: ignore[bad-argument-type]
        Logger.base.info(f'🧹 [Sweeper] Started, every {self._interval_seconds}s')

    async def run_once(self) -> SweepResult:
        return await self._use_case.sweep()

    async def _sweep_loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception as e:
                Logger.base.error(f'❌ [Sweeper] Sweep failed: {e}')
            await anyio.sleep(self._interval_seconds)
