import logging
import os
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pymongo import DESCENDING

from app.core.time_utils import utc_now
from app.db.database import get_journal_collection, get_media_collection
from app.models.media import MediaListResponse, MediaResponse, MediaType
from app.routers.auth_dependency import get_current_user_id, get_owned_document, parse_object_id
from app.routers.pagination import build_pagination
from app.services.media_service import (
    MAX_FILE_SIZE, MediaStorageError, destroy_file, media_type_for, upload_file,
)

logger = logging.getLogger(__name__)

MAX_CAPTION_LENGTH = 200

router = APIRouter(
    prefix="/media",
    tags=["Media"],
    dependencies=[Depends(get_current_user_id)]
)


def _file_size(upload: UploadFile) -> int:
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def check_upload(upload: UploadFile) -> str:
    """Validate type and size of an upload and return its media type."""
    try:
        media_type = media_type_for(upload.content_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if _file_size(upload) > MAX_FILE_SIZE:
        raise HTTPException(status_code=400, detail="File is larger than the 10MB limit")
    return media_type


def save_upload(
    upload: UploadFile,
    media_type: str,
    user_id: str,
    journal_id: Optional[ObjectId] = None,
    caption: str = "",
) -> dict:
    try:
        stored = upload_file(upload.file, user_id, media_type)
    except MediaStorageError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Media upload failed")

    media_data = {
        "type": media_type,
        "url": stored.url,
        "public_id": stored.public_id,
        "caption": caption,
        "user_id": user_id,
        "journal_id": journal_id,
        "file_size": stored.size or _file_size(upload),
        "mime_type": upload.content_type,
        "created_at": utc_now(),
    }
    result = get_media_collection().insert_one(media_data)
    media_data["_id"] = result.inserted_id

    if journal_id is not None:
        get_journal_collection().update_one(
            {"_id": journal_id},
            {"$push": {"media": media_data["_id"]}}
        )

    logger.info("Stored %s %s for user %s", media_type, stored.public_id, user_id)
    return media_data


def discard_uploads(media_docs: List[dict]) -> None:
    """Remove files and media documents saved by a batch that failed part way."""
    for media in media_docs:
        try:
            destroy_file(media["public_id"], media["type"])
        except MediaStorageError as e:
            logger.warning("Could not remove %s from the media host: %s", media["public_id"], e)

    if media_docs:
        get_media_collection().delete_many({"_id": {"$in": [m["_id"] for m in media_docs]}})


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(...),
    caption: str = Form(""),
    journal_id: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id)
):
    if len(caption) > MAX_CAPTION_LENGTH:
        raise HTTPException(
            status_code=400, detail=f"Caption cannot be more than {MAX_CAPTION_LENGTH} characters"
        )

    journal_oid = None
    if journal_id:
        entry = get_owned_document(get_journal_collection(), journal_id, user_id, "Journal", action="update")
        journal_oid = entry["_id"]

    media_type = check_upload(file)
    return save_upload(file, media_type, user_id, journal_id=journal_oid, caption=caption.strip())


@router.get("", response_model=MediaListResponse)
async def list_media(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: Optional[MediaType] = Query(None),
    journal_id: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id)
):
    query = {"user_id": user_id}
    if type:
        query["type"] = type.value
    if journal_id:
        query["journal_id"] = parse_object_id(journal_id)

    collection = get_media_collection()
    total = collection.count_documents(query)
    cursor = (
        collection.find(query)
        .sort("created_at", DESCENDING)
        .skip((page - 1) * limit)
        .limit(limit)
    )
    media = list(cursor)

    return MediaListResponse(
        count=len(media),
        total=total,
        pagination=build_pagination(page, limit, total),
        data=media,
    )


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: str,
    user_id: str = Depends(get_current_user_id)
):
    collection = get_media_collection()
    media = get_owned_document(collection, media_id, user_id, "Media", action="delete")

    try:
        destroy_file(media["public_id"], media["type"])
    except MediaStorageError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Media delete failed")

    if media.get("journal_id"):
        get_journal_collection().update_one(
            {"_id": media["journal_id"]},
            {"$pull": {"media": media["_id"]}}
        )

    collection.delete_one({"_id": media["_id"]})
    return None
