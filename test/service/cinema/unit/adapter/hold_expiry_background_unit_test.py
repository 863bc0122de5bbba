"""
Unit tests for the hold timers and the periodic expiry sweep

Both run inside an anyio task group, the same way the app lifespan starts them.
"""

from datetime import datetime, timezone
from typing import Callable

import anyio
import pytest

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.cinema.domain.enum.reservation_status import ReservationStatus
from src.service.cinema.driven_adapter.scheduler.hold_expiry_scheduler_impl import (
    HoldExpirySchedulerImpl,
)
from src.service.cinema.driving_adapter.background.expiry_sweeper import ExpirySweeper
from test.service.cinema.fakes import (
    FakeUnitOfWork,
    FrozenClock,
    InMemoryReservationStore,
    make_reservation,
)


LONG_AGO = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _flaky_uow_factory(
    store: InMemoryReservationStore, failures: int
) -> Callable[[], AbstractUnitOfWork]:
    calls = {'count': 0}

    def _factory() -> AbstractUnitOfWork:
        calls['count'] += 1
        if calls['count'] <= failures:
            raise RuntimeError('database unavailable')
        return FakeUnitOfWork(store)

    return _factory


@pytest.mark.unit
class TestHoldExpiryScheduler:
    @pytest.mark.asyncio
    async def test_timer_releases_unpaid_hold(
        self, store: InMemoryReservationStore, clock: FrozenClock
    ) -> None:
        """
        Given: A pending reservation whose hold is due now
        When: Its timer is scheduled in a task group
        Then: The reservation is cancelled once the timer fires
        """
        reservation = store.add(
            make_reservation(status=ReservationStatus.PENDING, hold_expires_at=clock())
        )
        scheduler = HoldExpirySchedulerImpl(
            uow_factory=lambda: FakeUnitOfWork(store), clock=clock, grace_seconds=0.0
        )

        async with anyio.create_task_group() as tg:
            scheduler.bind(task_group=tg)
            scheduler.schedule(reservation_id=reservation.id, due_at=clock())

        assert store.get(reservation.id).status == ReservationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_timer_leaves_confirmed_reservation(
        self, store: InMemoryReservationStore, clock: FrozenClock
    ) -> None:
        reservation = store.add(make_reservation(status=ReservationStatus.RESERVED))
        scheduler = HoldExpirySchedulerImpl(
            uow_factory=lambda: FakeUnitOfWork(store), clock=clock, grace_seconds=0.0
        )

        async with anyio.create_task_group() as tg:
            scheduler.bind(task_group=tg)
            scheduler.schedule(reservation_id=reservation.id, due_at=clock())

        assert store.get(reservation.id).status == ReservationStatus.RESERVED

    @pytest.mark.asyncio
    async def test_failed_timer_does_not_break_task_group(
        self, store: InMemoryReservationStore, clock: FrozenClock
    ) -> None:
        reservation = store.add(
            make_reservation(status=ReservationStatus.PENDING, hold_expires_at=clock())
        )
        scheduler = HoldExpirySchedulerImpl(
            uow_factory=_flaky_uow_factory(store, failures=1), clock=clock, grace_seconds=0.0
        )

        async with anyio.create_task_group() as tg:
            scheduler.bind(task_group=tg)
            scheduler.schedule(reservation_id=reservation.id, due_at=clock())

        # Left for the sweep
        assert store.get(reservation.id).status == ReservationStatus.PENDING

    def test_schedule_without_task_group_is_a_no_op(
        self, store: InMemoryReservationStore, clock: FrozenClock
    ) -> None:
        reservation = store.add(
            make_reservation(status=ReservationStatus.PENDING, hold_expires_at=clock())
        )
        scheduler = HoldExpirySchedulerImpl(uow_factory=lambda: FakeUnitOfWork(store), clock=clock)

        scheduler.schedule(reservation_id=reservation.id, due_at=clock())

        assert store.get(reservation.id).status == ReservationStatus.PENDING


@pytest.mark.unit
class TestExpirySweeper:
    @pytest.mark.asyncio
    async def test_run_once(self, store: InMemoryReservationStore) -> None:
        stale = store.add(
            make_reservation(status=ReservationStatus.PENDING, hold_expires_at=LONG_AGO)
        )
        sweeper = ExpirySweeper(uow_factory=lambda: FakeUnitOfWork(store))

        result = await sweeper.run_once()

        assert result.released_holds == [stale.id]
        assert store.get(stale.id).status == ReservationStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_loop_survives_a_failed_sweep(self, store: InMemoryReservationStore) -> None:
        """
        Given: The first sweep fails because the database is unavailable
        When: The sweep loop keeps running
        Then: A later sweep releases the stale hold
        """
        stale = store.add(
            make_reservation(status=ReservationStatus.PENDING, hold_expires_at=LONG_AGO)
        )
        sweeper = ExpirySweeper(
            uow_factory=_flaky_uow_factory(store, failures=1), interval_seconds=0.01
        )

        async with anyio.create_task_group() as tg:
            await sweeper.start(task_group=tg)
            with anyio.fail_after(2):
                while store.get(stale.id).status != ReservationStatus.CANCELLED:
                    await anyio.sleep(0.01)
            tg.cancel_scope.cancel()

        assert store.get(stale.id).status == ReservationStatus.CANCELLED
