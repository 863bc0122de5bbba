#!/usr/bin/env python3
"""
Hall Seed Script

Creates `Hall 1..N`, each laid out as rows A-G with 11 seats per row at the
default seat price. Existing halls are left alone unless --force is given.

Usage:
    python -m script.seed_halls [--halls 6] [--force]
"""

import argparse
import asyncio

from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine
from src.platform.logging.loguru_io import Logger
from src.service.cinema.app.command.seed_halls_use_case import SeedHallsUseCase


async def seed(*, hall_count: int, force: bool) -> int:
    use_case = SeedHallsUseCase(
        hall_command_repo=container.hall_command_repo(),
        seat_price=settings.DEFAULT_SEAT_PRICE,
    )
    try:
        halls = await use_case.execute(hall_count=hall_count, force=force)
    finally:
        await dispose_engine()
    return len(halls)


def main() -> None:
    parser = argparse.ArgumentParser(description='Seed cinema halls')
    parser.add_argument('--halls', type=int, default=6, help='number of halls to create')
    parser.add_argument('--force', action='store_true', help='delete and recreate existing halls')
    args = parser.parse_args()

    created = asyncio.run(seed(hall_count=args.halls, force=args.force))
    Logger.base.info(f'✅ [SEED] Done, {created} halls created')


if __name__ == '__main__':
    main()
