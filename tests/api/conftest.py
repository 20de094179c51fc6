import pytest
from fastapi.testclient import TestClient

from business_calendar.calendar.aggregator import Aggregator
from business_calendar.calendar.processor import SyncScheduler
from business_calendar.main import create_app


@pytest.fixture
def make_client(test_settings, memory_store):
    """Build a TestClient around the given sources; the lifespan runs inside the with-block."""

    def _make(sources=(), settings=None, store=None):
        settings = settings or test_settings
        store = store if store is not None else memory_store
        scheduler = SyncScheduler(Aggregator(list(sources)), store, update_at=settings.update_at)
        return TestClient(create_app(settings=settings, store=store, scheduler=scheduler))

    return _make
