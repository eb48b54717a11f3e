import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

load_dotenv()

logger = logging.getLogger(__name__)

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "memory_journal")

JOURNAL_COLLECTION = "journal_entries"
REMINDER_COLLECTION = "reminders"
MEDIA_COLLECTION = "media"
USER_COLLECTION = "users"

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def connect() -> Database:
    global _client, _db
    try:
        _client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=5000)
        _client.admin.command("ping")
    except ConnectionFailure as e:
        logger.error("Could not connect to MongoDB at %s: %s", MONGO_URI, e)
        raise
    _db = _client[DB_NAME]
    logger.info("Connected to MongoDB database %s", DB_NAME)
    return _db


def get_database() -> Database:
    if _db is None:
        return connect()
    return _db


def close() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def get_journal_collection() -> Collection:
    return get_database()[JOURNAL_COLLECTION]


def get_reminder_collection() -> Collection:
    return get_database()[REMINDER_COLLECTION]


def get_media_collection() -> Collection:
    return get_database()[MEDIA_COLLECTION]


def get_user_collection() -> Collection:
    return get_database()[USER_COLLECTION]


def ensure_indexes() -> None:
    try:
        get_journal_collection().create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        get_journal_collection().create_index(
            [("user_id", ASCENDING), ("category", ASCENDING), ("created_at", DESCENDING)]
        )
        get_reminder_collection().create_index([("user_id", ASCENDING), ("reminder_date", ASCENDING)])
        get_media_collection().create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        get_media_collection().create_index([("journal_id", ASCENDING), ("type", ASCENDING)])
        get_media_collection().create_index([("public_id", ASCENDING)])
    except PyMongoError as e:
        logger.warning("Index creation failed: %s", e)
