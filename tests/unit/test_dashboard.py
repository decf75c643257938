"""
Tests for the HTML pages.
"""

from tests.helpers import FailingEventStore, make_record


def test_index_lists_endpoints_and_pixel_snippet(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Email Tracking Server" in response.text
    assert "/stats" in response.text
    assert "http://testserver/track?email=user@company.com" in response.text


def test_dashboard_empty(client):
    response = client.get("/dashboard")

    assert response.status_code == 200
    assert "No tracking data yet" in response.text


def test_dashboard_shows_recent_opens_newest_first(client, event_store):
    event_store.replace_all(
        [
            make_record(f"2025-10-01T10:{i:02d}:00.000Z", email=f"user{i:02d}@company.com")
            for i in range(55)
        ]
    )

    text = client.get("/dashboard").text

    assert "Recent Email Opens (Last 50)" in text
    # Only the last 50 records appear, newest first
    assert "user04@company.com" not in text
    assert "user05@company.com" in text
    assert text.index("user54@company.com") < text.index("user05@company.com")
    # 55 opens across 55 users
    assert ">55<" in text
    assert ">1.0<" in text


def test_dashboard_escapes_stored_values(client, event_store):
    event_store.replace_all(
        [make_record("2025-10-01T10:00:00.000Z", user="<script>alert(1)</script>")]
    )

    text = client.get("/dashboard").text

    assert "<script>alert(1)</script>" not in text
    assert "&lt;script&gt;" in text


def test_history_empty_page(client):
    response = client.get("/history")

    assert response.status_code == 200
    assert "No Historical Data" in response.text


def test_history_page_newest_month_first_with_growth(client, event_store):
    records = [make_record(f"2025-01-{day:02d}T10:00:00.000Z") for day in range(1, 11)]
    records += [make_record(f"2025-02-{day:02d}T10:00:00.000Z") for day in range(1, 21)]
    records += [make_record(f"2025-03-{day:02d}T10:00:00.000Z") for day in range(1, 16)]
    event_store.replace_all(records)

    text = client.get("/history").text

    assert text.index("March 2025") < text.index("February 2025") < text.index("January 2025")
    assert '<div class="bar-label">Jan</div>' in text
    assert '<div class="bar-label">Mar</div>' in text
    assert "↑ 100.0%" in text
    assert "↓ 25.0%" in text
    assert "Declining" in text
    # Avg opens per month: 45 / 3
    assert ">15<" in text


def test_reset_page_clears_data(client, event_store):
    event_store.append(make_record("2025-10-01T10:00:00.000Z"))

    response = client.get("/reset")

    assert response.status_code == 200
    assert "Tracking Data Reset" in response.text
    assert event_store.load_all() == []


def test_reset_page_failure(client, override_store):
    override_store(FailingEventStore())

    response = client.get("/reset")

    assert response.status_code == 500
    assert "Reset Failed" in response.text


def test_reset_json(client, event_store):
    event_store.append(make_record("2025-10-01T10:00:00.000Z"))

    response = client.post("/reset")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "All tracking data has been reset"
    assert data["timestamp"].endswith("Z")
    assert event_store.load_all() == []


def test_reset_json_twice_leaves_store_empty(client, event_store):
    assert client.post("/reset").json()["success"] is True
    assert client.post("/reset").json()["success"] is True
    assert client.get("/stats").json()["totalOpens"] == 0


def test_reset_json_failure(client, override_store):
    override_store(FailingEventStore())

    response = client.post("/reset")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to reset tracking data"}
