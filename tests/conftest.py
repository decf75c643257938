import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.repositories.event_store import EventStore, JsonFileEventStore, get_event_store


@pytest.fixture
def event_store(tmp_path):
    store = JsonFileEventStore(tmp_path / "email-opens.json")
    store.initialize()
    return store


@pytest.fixture
def override_store():
    def _apply(store: EventStore):
        app.dependency_overrides[get_event_store] = lambda: store

    yield _apply
    app.dependency_overrides.pop(get_event_store, None)


@pytest.fixture
def client(event_store, override_store):
    override_store(event_store)
    return TestClient(app)
