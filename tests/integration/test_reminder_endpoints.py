"""
Reminder API coverage.
"""
from datetime import datetime

from bson import ObjectId


def _create(client, **overrides):
    payload = {
        "title": "Evening reflection",
        "description": "Write three lines",
        "reminder_date": "2026-10-20T20:00:00",
    }
    payload.update(overrides)
    return client.post("/reminders", json=payload)


def test_create_one_time_reminder(client):
    response = _create(client, recurring_pattern="daily")

    assert response.status_code == 201
    body = response.json()
    assert body["is_active"] is True
    assert body["is_recurring"] is False
    # a pattern on a one-time reminder is dropped
    assert body["recurring_pattern"] is None
    assert body["reminder_date"] == "2026-10-20T20:00:00"


def test_create_recurring_reminder_requires_pattern(client):
    assert _create(client, is_recurring=True).status_code == 422
    assert _create(client, is_recurring=True, recurring_pattern="hourly").status_code == 422

    response = _create(client, is_recurring=True, recurring_pattern="weekly")
    assert response.status_code == 201
    assert response.json()["recurring_pattern"] == "weekly"


def test_create_reminder_converts_aware_dates_to_utc(client, mongo_db):
    response = _create(client, reminder_date="2026-10-20T22:00:00+02:00")

    assert response.status_code == 201
    stored = mongo_db["reminders"].find_one({})
    assert stored["reminder_date"] == datetime(2026, 10, 20, 20, 0)


def test_list_reminders_filters_and_sorts(client, other_client):
    _create(client, title="late", reminder_date="2026-10-25T08:00:00")
    _create(client, title="early", reminder_date="2026-10-18T08:00:00", is_recurring=True, recurring_pattern="daily")
    _create(other_client, title="not mine")

    everything = client.get("/reminders").json()
    recurring = client.get("/reminders", params={"is_recurring": "true"}).json()
    in_range = client.get(
        "/reminders",
        params={"start_date": "2026-10-24T00:00:00", "end_date": "2026-10-26T00:00:00"},
    ).json()

    assert everything["count"] == 2
    assert [r["title"] for r in everything["data"]] == ["early", "late"]
    assert [r["title"] for r in recurring["data"]] == ["early"]
    assert [r["title"] for r in in_range["data"]] == ["late"]


def test_update_reminder(client):
    reminder_id = _create(client).json()["_id"]

    response = client.put(f"/reminders/{reminder_id}", json={"is_recurring": True, "recurring_pattern": "monthly"})
    assert response.status_code == 200
    assert response.json()["recurring_pattern"] == "monthly"

    response = client.put(f"/reminders/{reminder_id}", json={"is_recurring": False})
    assert response.json()["recurring_pattern"] is None

    assert client.put(f"/reminders/{reminder_id}", json={"is_recurring": True}).status_code == 422
    assert client.put(f"/reminders/{reminder_id}", json={}).status_code == 400


def test_reminder_ownership(client, other_client):
    reminder_id = _create(client).json()["_id"]

    assert other_client.get(f"/reminders/{reminder_id}").status_code == 401
    assert other_client.delete(f"/reminders/{reminder_id}").status_code == 401
    assert client.get(f"/reminders/{ObjectId()}").status_code == 404
    assert client.get("/reminders/123").status_code == 400


def test_delete_reminder(client, mongo_db):
    reminder_id = _create(client).json()["_id"]

    assert client.delete(f"/reminders/{reminder_id}").status_code == 204
    assert mongo_db["reminders"].count_documents({}) == 0


def test_list_tolerates_unknown_stored_pattern(client, mongo_db):
    mongo_db["reminders"].insert_one({
        "user_id": "user-1",
        "title": "Legacy",
        "reminder_date": datetime(2026, 10, 20, 8),
        "is_recurring": True,
        "recurring_pattern": "hourly",
        "is_active": True,
        "created_at": datetime(2026, 10, 1),
    })

    response = client.get("/reminders")

    assert response.status_code == 200
    assert response.json()["data"][0]["recurring_pattern"] == "hourly"
