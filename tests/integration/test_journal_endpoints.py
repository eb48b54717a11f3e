"""
Journal API coverage.
"""
from datetime import datetime, timedelta, timezone

from bson import ObjectId


def _create(client, **overrides):
    payload = {
        "title": "  Morning pages  ",
        "content": "Slept well and feel calm and relaxed.",
        "category": "personal",
        "mood": "calm",
        "tags": ["sleep", "morning"],
    }
    payload.update(overrides)
    return client.post("/journals", json=payload)


def _insert_entry(mongo_db, user_id="user-1", **fields):
    doc = {
        "user_id": user_id,
        "title": "Entry",
        "content": "text",
        "category": "personal",
        "mood": "neutral",
        "tags": [],
        "media": [],
        "created_at": datetime(2026, 10, 1, 9),
    }
    doc.update(fields)
    return mongo_db["journal_entries"].insert_one(doc).inserted_id


def test_create_entry(client, mongo_db):
    response = _create(client)

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Morning pages"
    assert body["mood"] == "calm"
    assert body["user_id"] == "user-1"
    assert body["media"] == []
    assert mongo_db["journal_entries"].count_documents({}) == 1


def test_create_entry_detects_mood_when_missing(client):
    response = _create(client, mood=None, content="I am so angry and frustrated today")

    assert response.status_code == 201
    assert response.json()["mood"] == "angry"


def test_create_entry_validation(client):
    assert _create(client, category="work").status_code == 422
    assert _create(client, mood="bored").status_code == 422
    assert _create(client, title="x" * 101).status_code == 422
    assert _create(client, title="   ").status_code == 422


def test_requests_without_user_header_are_rejected(client):
    response = client.get("/journals", headers={"X-User-ID": ""})

    assert response.status_code == 401


def test_list_entries_paginates_newest_first(client, mongo_db):
    for day in range(5):
        _insert_entry(mongo_db, title=f"day {day}", created_at=datetime(2026, 10, 1 + day, 9))
    _insert_entry(mongo_db, user_id="user-2")

    first = client.get("/journals", params={"page": 1, "limit": 2}).json()
    second = client.get("/journals", params={"page": 2, "limit": 2}).json()

    assert first["total"] == 5
    assert [e["title"] for e in first["data"]] == ["day 4", "day 3"]
    assert first["pagination"] == {"next": {"page": 2, "limit": 2}, "prev": None}
    assert [e["title"] for e in second["data"]] == ["day 2", "day 1"]
    assert second["pagination"]["prev"] == {"page": 1, "limit": 2}


def test_list_entries_filters(client, mongo_db):
    _insert_entry(mongo_db, title="a", mood="happy", tags=["work"], created_at=datetime(2026, 10, 1, 9))
    _insert_entry(mongo_db, title="b", mood="sad", tags=["home"], created_at=datetime(2026, 10, 5, 9))
    _insert_entry(mongo_db, title="c", mood="happy", tags=["trip"], created_at=datetime(2026, 10, 9, 9))

    by_mood = client.get("/journals", params={"mood": "happy"}).json()
    by_tags = client.get("/journals", params={"tags": "home, trip"}).json()
    by_range = client.get(
        "/journals",
        params={"start_date": "2026-10-04T00:00:00", "end_date": "2026-10-10T00:00:00"},
    ).json()

    assert sorted(e["title"] for e in by_mood["data"]) == ["a", "c"]
    assert sorted(e["title"] for e in by_tags["data"]) == ["b", "c"]
    assert sorted(e["title"] for e in by_range["data"]) == ["b", "c"]


def test_get_single_entry_with_media(client, mongo_db):
    media_id = mongo_db["media"].insert_one({
        "type": "image", "url": "https://cdn.example/a.png", "public_id": "a",
        "user_id": "user-1", "created_at": datetime(2026, 10, 1),
    }).inserted_id
    entry_id = _insert_entry(mongo_db, media=[media_id])

    response = client.get(f"/journals/{entry_id}")

    assert response.status_code == 200
    assert response.json()["media"] == [
        {"_id": str(media_id), "url": "https://cdn.example/a.png", "type": "image"}
    ]


def test_entry_ownership_and_ids(client, other_client, mongo_db):
    entry_id = _insert_entry(mongo_db)

    assert client.get("/journals/not-an-id").status_code == 400
    assert client.get(f"/journals/{ObjectId()}").status_code == 404
    assert other_client.get(f"/journals/{entry_id}").status_code == 401
    assert other_client.put(f"/journals/{entry_id}", json={"title": "x"}).status_code == 401
    assert other_client.delete(f"/journals/{entry_id}").status_code == 401


def test_update_entry(client, mongo_db):
    entry_id = _insert_entry(mongo_db)

    response = client.put(f"/journals/{entry_id}", json={"mood": "happy", "tags": ["new"]})

    assert response.status_code == 200
    assert response.json()["mood"] == "happy"
    assert response.json()["tags"] == ["new"]
    assert response.json()["title"] == "Entry"
    assert client.put(f"/journals/{entry_id}", json={}).status_code == 400
    assert client.put(f"/journals/{entry_id}", json={"category": "other"}).status_code == 422


def test_delete_entry_unlinks_media(client, mongo_db):
    entry_id = _insert_entry(mongo_db)
    media_id = mongo_db["media"].insert_one({"journal_id": entry_id, "user_id": "user-1"}).inserted_id

    response = client.delete(f"/journals/{entry_id}")

    assert response.status_code == 204
    assert mongo_db["journal_entries"].find_one({"_id": entry_id}) is None
    assert mongo_db["media"].find_one({"_id": media_id})["journal_id"] is None


def test_analyze_text(client):
    response = client.post("/journals/analyze", json={"content": "peaceful and quiet afternoon"})

    assert response.status_code == 200
    assert response.json() == {"mood": "calm"}


def test_created_at_is_recent(client):
    body = _create(client).json()

    created_at = datetime.fromisoformat(body["created_at"])
    assert datetime.now(timezone.utc).replace(tzinfo=None) - created_at < timedelta(minutes=1)
