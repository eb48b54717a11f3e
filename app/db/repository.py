"""
Queries the analytics endpoint and the reminder scheduler run against Mongo.

Both engines in ``app.core`` only see the values returned here.
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from bson import ObjectId
from pymongo import ASCENDING

from app.core.analytics import MoodSample
from app.core.recurrence import DUE_HORIZON, ReminderUpdate
from app.db.database import get_journal_collection, get_reminder_collection


def find_entries_by_user_and_window(
    user_id: str,
    start: Optional[datetime],
    end: Optional[datetime],
    exclude_moods: Iterable[str] = (),
) -> List[MoodSample]:
    query = {"user_id": user_id}

    created_at = {}
    if start is not None:
        created_at["$gte"] = start
    if end is not None:
        created_at["$lte"] = end
    if created_at:
        query["created_at"] = created_at

    excluded = list(exclude_moods)
    if excluded:
        query["mood"] = {"$nin": excluded}

    cursor = get_journal_collection().find(
        query, {"mood": 1, "created_at": 1, "_id": 0}
    ).sort("created_at", ASCENDING)

    return [MoodSample(mood=doc.get("mood", "neutral"), created_at=doc["created_at"]) for doc in cursor]


def find_due_reminders(now: datetime, horizon: timedelta = DUE_HORIZON) -> List[dict]:
    cursor = get_reminder_collection().find({
        "is_active": True,
        "reminder_date": {"$gte": now, "$lte": now + horizon},
    }).sort("reminder_date", ASCENDING)
    return list(cursor)


def update_reminder(reminder_id: ObjectId, update: ReminderUpdate, expected_date: datetime) -> bool:
    """
    Apply an engine update only if the reminder still holds the state it was read with.

    Returns False when another scan already moved or deactivated it.
    """
    result = get_reminder_collection().update_one(
        {"_id": reminder_id, "reminder_date": expected_date, "is_active": True},
        {"$set": update.to_set()},
    )
    return result.matched_count == 1
