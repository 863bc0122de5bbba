"""
Production FastAPI Application

Serves the reservation API and runs the hold-expiry timers and sweep in the
lifespan task group.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Cinema Service] Starting up...')

    # Wire dependency injection for all modules
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Cinema Service] Dependency injection wired')

    # Initialize database engine on this event loop
    get_engine()
    Logger.base.info('🗄️  [Cinema Service] Database engine ready')

    # Task group for hold timers and the periodic sweep
    async with anyio.create_task_group() as tg:
        hold_scheduler = container.hold_expiry_scheduler()
        hold_scheduler.bind(task_group=tg)

        sweeper = container.expiry_sweeper()
        await sweeper.start(task_group=tg)
        Logger.base.info('✅ [Cinema Service] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Cinema Service] Shutting down...')
        hold_scheduler.unbind()
        tg.cancel_scope.cancel()

    await dispose_engine()
    Logger.base.info('🗄️  [Cinema Service] Database engine disposed')

    # Unwire DI
    container.unwire()

    Logger.base.info('👋 [Cinema Service] Shutdown complete')


# Create FastAPI app using shared factory
app = create_app(
    lifespan=lifespan,
    description='Cinema Reservation System - seat availability, reservations, payments and refunds',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
