"""
Test Configuration and Fixtures

This module provides:
- Environment setup that must happen before application modules are imported
- Shared time fixtures for the reservation lifecycle

Architecture:
- Unit tests (test/**/unit/): in-memory fakes from test/service/cinema/fakes.py, no database
- API tests (test/**/api/): FastAPI TestClient with the DI container overridden by the same fakes
- Integration tests (test/**/integration/): the SQL adapters against a real PostgreSQL test database
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Logging reads TEST_LOG_DIR and settings read env vars at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['POSTGRES_DB'] = 'cinema_reservation_test_db'
    os.environ.setdefault('CINEMA_TIMEZONE', 'UTC')
    os.environ.setdefault('STRIPE_SECRET_KEY', 'sk_test_unit')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from test.service.cinema.fakes import FrozenClock  # noqa: E402


@pytest.fixture
def clock() -> FrozenClock:
    """Two days before the 2025-11-20 18:00 screening used across the suite"""
    return FrozenClock(datetime(2025, 11, 18, 10, 0, tzinfo=timezone.utc))
