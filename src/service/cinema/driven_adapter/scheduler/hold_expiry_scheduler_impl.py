from datetime import datetime
from typing import Callable
from uuid import UUID

import anyio
from anyio.abc import TaskGroup

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.expire_stale_holds_use_case import ExpireStaleHoldsUseCase
from src.service.cinema.app.interface.i_hold_expiry_scheduler import IHoldExpiryScheduler
from src.service.cinema.domain.value_object.reservation_policy import utc_now


class HoldExpirySchedulerImpl(IHoldExpiryScheduler):
    """
    One detached timer per pending reservation, running in the app's task group.

    Timers live only as long as the process; the periodic sweep picks up any hold
    whose timer was lost to a restart.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        clock: Callable[[], datetime] = utc_now,
        grace_seconds: float = 1.0,  # Fire slightly after the deadline so the hold has surely run out
    ) -> None:
        self._use_case = ExpireStaleHoldsUseCase(uow_factory=uow_factory, clock=clock)
        self._clock = clock
        self._grace_seconds = grace_seconds
        self._task_group: TaskGroup | None = None

    def bind(self, *, task_group: TaskGroup) -> None:
        """Attach the lifespan task group; called once at startup"""
        self._task_group = task_group

    def unbind(self) -> None:
        self._task_group = None

    def schedule(self, *, reservation_id: UUID, due_at: datetime) -> None:
        if self._task_group is None:
            Logger.base.warning(
                f'⚠️ [HOLD] No task group bound, hold of {reservation_id} is left to the sweep'
            )
            return
        self._task_group.start_soon(  # pyrefly: ignore[bad-argument-type]
            self._release_when_due, reservation_id, due_at
        )

    async def _release_when_due(self, reservation_id: UUID, due_at: datetime) -> None:
        delay = (due_at - self._clock()).total_seconds() + self._grace_seconds
        await anyio.sleep(max(delay, 0.0))
        try:
            await self._use_case.release_hold(reservation_id=reservation_id)
        except Exception as e:
            # The periodic sweep retries, a failed timer must not take the task group down
            Logger.base.error(f'❌ [HOLD] Failed to release {reservation_id}: {e}')
