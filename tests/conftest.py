"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- catalog / breakdowns / hours_config: the default catalogs shipped in desglose/data
- state: TrackerState with a one-week period in January 2025
- store: StateStore holding that state
- test_client: FastAPI TestClient whose store dependency is overridden
"""

import datetime
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from desglose.core import tracker
from desglose.core.models import HoursConfig
from desglose.core.storage import load_breakdowns, load_hours_config, load_positions
from desglose.core.store import StateStore, get_store
from desglose.main import app

PERIOD_START = datetime.date(2025, 1, 6)
PERIOD_END = datetime.date(2025, 1, 12)


@pytest.fixture
def catalog():
    """Default position catalog (CM, CT, CN, TN1, ...)."""
    return load_positions()


@pytest.fixture
def breakdowns():
    """Default breakdowns: only the global night breakdown 22:00-06:00."""
    return load_breakdowns()


@pytest.fixture
def hours_config() -> HoursConfig:
    return load_hours_config()


@pytest.fixture
def state(catalog, breakdowns, hours_config):
    """
    Tracker state with a 7-day period and the default catalogs.

    Returns:
        TrackerState with entries for 2025-01-06..2025-01-12, all unassigned
    """
    initial = tracker.TrackerState(positions=catalog, breakdowns=breakdowns, hours_config=hours_config)
    return tracker.update_period(initial, PERIOD_START, PERIOD_END)


@pytest.fixture
def store(state):
    return StateStore(state)


@pytest.fixture(scope="function")
def test_client(store):
    """
    Create FastAPI TestClient with the store dependency overridden.

    Every test gets its own StateStore so state never leaks between tests.

    Yields:
        TestClient: FastAPI test client for API testing
    """
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()


def entry_for(state, day: datetime.date):
    """Return the entry of `day` in `state`."""
    return next(e for e in state.entries if e.date == day)
