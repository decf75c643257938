"""
Tests for the tracking pixel endpoint and open-event ingestion.
"""

from datetime import UTC, datetime

import pytest

from app.services.tracking_service import TRANSPARENT_PIXEL, build_open_event, record_open
from tests.helpers import FailingEventStore, make_record


def test_track_returns_uncacheable_png(client):
    response = client.get("/track?email=a@company.com&user=Alice&newsletter=oct-2025")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == TRANSPARENT_PIXEL
    assert response.headers["cache-control"] == (
        "no-store, no-cache, must-revalidate, proxy-revalidate"
    )
    assert response.headers["pragma"] == "no-cache"
    assert response.headers["expires"] == "0"


def test_track_records_open_event(client, event_store):
    client.get(
        "/track?email=a@company.com&user=Alice&newsletter=oct-2025",
        headers={"User-Agent": "Outlook/16.0"},
    )

    records = event_store.load_all()
    assert len(records) == 1
    record = records[0]
    assert record.email == "a@company.com"
    assert record.user == "Alice"
    assert record.newsletter == "oct-2025"
    assert record.user_agent == "Outlook/16.0"
    assert record.ip == "testclient"
    assert record.timestamp.endswith("Z")


def test_track_defaults_missing_and_empty_fields(client, event_store):
    client.get("/track?email=&newsletter=")

    record = event_store.load_all()[0]
    assert record.email == "unknown"
    assert record.user == "unknown"
    assert record.newsletter == "unknown"


def test_track_uses_first_forwarded_for_address(client, event_store):
    client.get("/track?email=a@company.com", headers={"X-Forwarded-For": " 203.0.113.7 , 10.0.0.1"})

    assert event_store.load_all()[0].ip == "203.0.113.7"


def test_track_returns_pixel_even_when_store_write_fails(client, override_store):
    override_store(FailingEventStore())

    response = client.get("/track?email=a@company.com")

    assert response.status_code == 200
    assert response.content == TRANSPARENT_PIXEL


def test_distinct_opens_are_all_counted(client):
    for i in range(5):
        client.get(f"/track?email=user{i}@company.com&newsletter=oct-2025")

    data = client.get("/stats").json()

    assert data["totalOpens"] == 5
    assert data["uniqueUsers"] == 5


def test_build_open_event_stamps_server_time():
    now = datetime(2025, 10, 1, 12, 34, 56, 789000, tzinfo=UTC)

    record = build_open_event(None, "", "oct-2025", None, None, now=now)

    assert record.timestamp == "2025-10-01T12:34:56.789Z"
    assert record.email == "unknown"
    assert record.user == "unknown"
    assert record.newsletter == "oct-2025"
    assert record.ip == "unknown"
    assert record.user_agent == "unknown"


@pytest.mark.asyncio
async def test_record_open_swallows_store_exceptions():
    class ExplodingStore(FailingEventStore):
        def append(self, record):
            raise PermissionError("read-only filesystem")

    saved = await record_open(ExplodingStore(), make_record("2025-10-01T10:00:00.000Z"))

    assert saved is False


@pytest.mark.asyncio
async def test_record_open_persists(event_store):
    record = make_record("2025-10-01T10:00:00.000Z")

    assert await record_open(event_store, record) is True
    assert event_store.load_all() == [record]
