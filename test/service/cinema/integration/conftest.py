"""
Integration test configuration: the SQL adapters against a real PostgreSQL database.

Flow:
- Once per session: create the test database if missing, reset its schema and
  run the Alembic migrations (skipped when PostgreSQL is not reachable)
- Per test: truncate every table, then dispose the engine so the next test's
  event loop gets a fresh pool; hall and movie seeding fixtures are opt-in
"""

import asyncio
from pathlib import Path
from typing import AsyncGenerator, Callable

from alembic import command
from alembic.config import Config
import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database, dispose_engine, get_engine
from src.platform.database.unit_of_work import AbstractUnitOfWork, SqlAlchemyUnitOfWork
from src.service.cinema.domain.entity.hall_entity import Hall
from src.service.cinema.driven_adapter.model.movie_model import MovieModel
from src.service.cinema.driven_adapter.repo.hall_repo_impl import HallCommandRepoImpl
from test.service.cinema.fakes import SCREENING_AT


PROJECT_ROOT = Path(__file__).resolve().parents[4]


async def _setup_test_database() -> None:
    test_db = settings.POSTGRES_DB
    db_url = settings.DATABASE_URL_ASYNC

    # Create database if not exists
    postgres_url = db_url.replace(f'/{test_db}', '/postgres')
    engine = create_async_engine(postgres_url, isolation_level='AUTOCOMMIT')
    try:
        async with engine.begin() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'), {'name': test_db}
            )
            if not result.fetchone():
                await conn.execute(text(f'CREATE DATABASE "{test_db}"'))
    finally:
        await engine.dispose()

    # Reset schema; migrations run afterwards, outside this event loop
    reset_engine = create_async_engine(db_url)
    try:
        async with reset_engine.begin() as conn:
            await conn.execute(text('DROP SCHEMA public CASCADE'))
            await conn.execute(text('CREATE SCHEMA public'))
    finally:
        await reset_engine.dispose()


@pytest.fixture(scope='session')
def migrated_database() -> None:
    try:
        asyncio.run(_setup_test_database())
    except (OSError, DBAPIError) as e:
        pytest.skip(f'PostgreSQL not reachable at {settings.POSTGRES_SERVER}: {e}')

    # env.py drives its own event loop with asyncio.run
    alembic_cfg = Config(str(PROJECT_ROOT / 'alembic.ini'))
    alembic_cfg.set_main_option('script_location', str(PROJECT_ROOT / 'src/platform/alembic'))
    command.upgrade(alembic_cfg, 'head')


async def _clean_all_tables() -> None:
    async with get_engine().begin() as conn:
        result = await conn.execute(
            text(
                "SELECT tablename FROM pg_tables WHERE schemaname = 'public' "
                "AND tablename != 'alembic_version'"
            )
        )
        tables = [f'"{row[0]}"' for row in result]
        if tables:
            await conn.execute(text(f'TRUNCATE {", ".join(tables)} RESTART IDENTITY CASCADE'))


@pytest.fixture(autouse=True)
async def clean_database(migrated_database: None) -> AsyncGenerator[None, None]:
    await _clean_all_tables()
    yield
    await dispose_engine()


@pytest.fixture
def database() -> Database:
    return Database()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], AbstractUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


@pytest.fixture
async def seeded_hall(database: Database) -> Hall:
    """Hall 1: rows A-G x 11 seats at 20"""
    [hall] = await HallCommandRepoImpl(session_factory=database.session).create_many(
        halls=[Hall.with_default_layout(name='Hall 1')]
    )
    return hall


@pytest.fixture
async def seeded_movie_id(database: Database, seeded_hall: Hall) -> int:
    async with database.session() as session:
        movie = MovieModel(
            title='Dune: Part Two',
            duration=166,
            genres=['Sci-Fi'],
            hall_id=seeded_hall.id,
            showtimes=[SCREENING_AT],
            in_theaters=True,
        )
        session.add(movie)
        await session.commit()
        return movie.id
