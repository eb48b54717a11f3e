from fastapi import Header, HTTPException, status
from typing import Annotated, Optional
from bson import ObjectId
from pymongo.collection import Collection

from app.core.time_utils import utc_now
from app.db.database import get_user_collection

ID_INVALID_MESSAGE = "Invalid ID"


def get_current_user_id(x_user_id: Annotated[Optional[str], Header()] = None) -> str:

    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-ID header"
        )

    user_collection = get_user_collection()

    user_collection.update_one(
        {"_id": x_user_id},
        {"$setOnInsert": {"name": None, "email": None, "created_at": utc_now()}},
        upsert=True,
    )

    return x_user_id


def parse_object_id(value: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ID_INVALID_MESSAGE)
    return ObjectId(value)


def get_owned_document(collection: Collection, doc_id: str, user_id: str, resource: str, action: str = "access") -> dict:
    """Load a document by id and make sure it belongs to the caller."""
    doc = collection.find_one({"_id": parse_object_id(doc_id)})

    if doc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")

    if doc.get("user_id") != user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Not authorized to {action} this {resource.lower()}",
        )

    return doc
