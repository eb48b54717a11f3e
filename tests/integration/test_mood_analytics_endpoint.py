"""
Mood analytics endpoint with a fixed clock.
"""
from datetime import datetime, timedelta

import pytest

from app.main import app
from app.routers.stat_router import get_clock

NOW = datetime(2026, 10, 17, 18, 0)


@pytest.fixture
def fixed_clock(client):
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    return NOW


def _insert(mongo_db, days_ago, mood, user_id="user-1", hour=9):
    created_at = (NOW - timedelta(days=days_ago)).replace(hour=hour)
    mongo_db["journal_entries"].insert_one({
        "user_id": user_id,
        "title": "t",
        "content": "c",
        "category": "personal",
        "mood": mood,
        "tags": [],
        "media": [],
        "created_at": created_at,
    })


def test_week_analytics(client, mongo_db, fixed_clock):
    _insert(mongo_db, 3, "sad")
    _insert(mongo_db, 2, "happy")
    _insert(mongo_db, 1, "happy")
    _insert(mongo_db, 0, "other")
    _insert(mongo_db, 0, "calm")
    _insert(mongo_db, 20, "angry")
    _insert(mongo_db, 1, "excited", user_id="user-2")

    response = client.get("/journals/mood-analytics", params={"timeFilter": "week"})

    assert response.status_code == 200
    body = response.json()
    assert body["time_filter"] == "week"
    assert body["total_entries"] == 4
    assert body["mood_frequency"] == {"happy": 2, "sad": 1, "calm": 1}
    assert body["most_frequent_mood"] == "happy"
    assert body["average_mood"] == 3.8
    assert body["current_streak"] == 4
    assert body["longest_streak"] == 4
    assert body["chart_data"][0] == {"date": "2026-10-14", "mood_value": 1, "mood": "sad"}
    assert len(body["chart_data"]) == 4


def test_month_is_the_default_window(client, mongo_db, fixed_clock):
    _insert(mongo_db, 20, "angry")
    _insert(mongo_db, 45, "happy")

    body = client.get("/journals/mood-analytics").json()

    assert body["time_filter"] == "month"
    assert body["total_entries"] == 1
    assert body["average_mood"] == 0.0
    assert body["most_frequent_mood"] == "angry"
    assert body["current_streak"] == 0
    assert body["longest_streak"] == 1
    assert body["chart_data"] == [{"date": "2026-09-27", "mood_value": 3, "mood": "angry"}]


def test_all_time_window(client, mongo_db, fixed_clock):
    _insert(mongo_db, 45, "happy")
    _insert(mongo_db, 400, "sad")

    body = client.get("/journals/mood-analytics", params={"timeFilter": "all"}).json()

    assert body["total_entries"] == 2
    assert body["average_mood"] == 3.0


def test_empty_analytics(client, mongo_db, fixed_clock):
    body = client.get("/journals/mood-analytics", params={"timeFilter": "week"}).json()

    assert body == {
        "total_entries": 0,
        "average_mood": 0.0,
        "most_frequent_mood": None,
        "current_streak": 0,
        "longest_streak": 0,
        "mood_frequency": {},
        "chart_data": [],
        "time_filter": "week",
    }


def test_invalid_time_filter(client, fixed_clock):
    assert client.get("/journals/mood-analytics", params={"timeFilter": "year"}).status_code == 422
