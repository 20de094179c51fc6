"""Root conftest for all tests.

Shared fixtures for stores and calendar data.
"""

import pytest

from business_calendar.calendar.models import Day, DayType, WeekDay
from business_calendar.core.settings import Settings
from business_calendar.store.memory import MemoryStore
from business_calendar.store.sql import SqlStore


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_store(tmp_path):
    store = SqlStore(f"sqlite:///{tmp_path / 'cal.db'}")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def any_store(request, tmp_path):
    """Every store engine, for contract tests."""
    if request.param == "memory":
        yield MemoryStore()
        return

    store = SqlStore(f"sqlite:///{tmp_path / 'contract.db'}")
    yield store
    store.close()


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment: memory store, no startup sync, no timer."""
    return Settings(
        _env_file=None,
        store_engine="memory",
        sync_on_start="none",
        sync_at=None,
        web_admin_passwd="secret",
        shutdown_timeout=5.0,
    )


@pytest.fixture
def new_year_holidays():
    """First days of January 2022 as published by an external source."""
    return {
        1: {
            1: Day(WeekDay.SATURDAY, False, DayType.HOLIDAY, "New Year"),
            2: Day(WeekDay.SUNDAY, False, DayType.HOLIDAY),
            3: Day(WeekDay.MONDAY, False, DayType.HOLIDAY),
        }
    }
