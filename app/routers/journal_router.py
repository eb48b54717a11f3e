import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query, Form, File, UploadFile
from fastapi.exceptions import RequestValidationError
from typing import List, Optional
from datetime import datetime
from pydantic import ValidationError
from pymongo import DESCENDING, ReturnDocument

from app.core.emotion import detect_emotion
from app.core.analytics import Mood
from app.core.time_utils import utc_now, to_naive_utc
from app.db.database import get_journal_collection, get_media_collection
from app.models.journal import (
    JournalEntryResponse, JournalListResponse, NewEntryRequest, UpdateEntryRequest,
    AnalyzeTextRequest, AnalyzeTextResponse,
)
from app.routers.auth_dependency import get_current_user_id, get_owned_document
from app.routers.media_router import check_upload, discard_uploads, save_upload
from app.routers.pagination import build_pagination

logger = logging.getLogger(__name__)

MAX_FILES_PER_ENTRY = 10

router = APIRouter(
    prefix="/journals",
    tags=["Journal"],
    dependencies=[Depends(get_current_user_id)]
)


def populate_media(entries: List[dict]) -> List[dict]:
    """Replace media ids on each entry with {_id, url, type} documents."""
    media_ids = {media_id for entry in entries for media_id in entry.get("media", [])}
    media_by_id = {}
    if media_ids:
        cursor = get_media_collection().find(
            {"_id": {"$in": list(media_ids)}}, {"url": 1, "type": 1}
        )
        media_by_id = {doc["_id"]: doc for doc in cursor}

    for entry in entries:
        entry["media"] = [media_by_id[m] for m in entry.get("media", []) if m in media_by_id]
    return entries


def insert_entry(request: NewEntryRequest, user_id: str) -> dict:
    new_entry_data = {
        "user_id": user_id,
        "title": request.title,
        "content": request.content,
        "category": request.category,
        "mood": request.mood or detect_emotion(request.content),
        "tags": request.tags,
        "location": request.location,
        "media": [],
        "created_at": utc_now(),
    }
    collection = get_journal_collection()
    result = collection.insert_one(new_entry_data)
    new_entry_data["_id"] = result.inserted_id
    return new_entry_data


@router.post("", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    request: NewEntryRequest,
    user_id: str = Depends(get_current_user_id)
):
    return insert_entry(request, user_id)


@router.post("/with-media", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry_with_media(
    title: str = Form(...),
    content: str = Form(...),
    category: str = Form(...),
    mood: Optional[str] = Form(None),
    tags: List[str] = Form(default=[]),
    location: Optional[str] = Form(None),
    files: List[UploadFile] = File(...),
    user_id: str = Depends(get_current_user_id)
):
    try:
        request = NewEntryRequest(
            title=title, content=content, category=category,
            mood=mood, tags=tags, location=location,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    if len(files) > MAX_FILES_PER_ENTRY:
        raise HTTPException(
            status_code=400, detail=f"At most {MAX_FILES_PER_ENTRY} files can be attached"
        )

    # Reject bad files before anything is written
    media_types = [check_upload(upload) for upload in files]

    entry = insert_entry(request, user_id)
    saved = []
    try:
        for upload, media_type in zip(files, media_types):
            saved.append(save_upload(upload, media_type, user_id, journal_id=entry["_id"]))
    except HTTPException:
        discard_uploads(saved)
        get_journal_collection().delete_one({"_id": entry["_id"]})
        logger.warning("Upload failed, removed journal %s and %d stored files", entry["_id"], len(saved))
        raise

    created = get_journal_collection().find_one({"_id": entry["_id"]})
    return populate_media([created])[0]


@router.get("", response_model=JournalListResponse)
async def list_entries(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    mood: Optional[Mood] = Query(None),
    tags: Optional[str] = Query(None, description="Comma separated, matches any"),
    user_id: str = Depends(get_current_user_id)
):
    query = {"user_id": user_id}

    if start_date and end_date:
        query["created_at"] = {
            "$gte": to_naive_utc(start_date),
            "$lte": to_naive_utc(end_date),
        }

    if mood:
        query["mood"] = mood.value

    if tags:
        tag_list = [tag.strip() for tag in tags.split(",") if tag.strip()]
        if tag_list:
            query["tags"] = {"$in": tag_list}

    collection = get_journal_collection()
    total = collection.count_documents(query)
    cursor = (
        collection.find(query)
        .sort("created_at", DESCENDING)
        .skip((page - 1) * limit)
        .limit(limit)
    )
    entries = populate_media(list(cursor))

    return JournalListResponse(
        count=len(entries),
        total=total,
        pagination=build_pagination(page, limit, total),
        data=entries,
    )


@router.post("/analyze", response_model=AnalyzeTextResponse)
async def analyze_text(request: AnalyzeTextRequest):
    return AnalyzeTextResponse(mood=detect_emotion(request.content))


@router.get("/{entry_id}", response_model=JournalEntryResponse)
async def get_single_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id)
):
    entry = get_owned_document(get_journal_collection(), entry_id, user_id, "Journal")
    return populate_media([entry])[0]


@router.put("/{entry_id}", response_model=JournalEntryResponse)
async def update_entry(
    entry_id: str,
    request: UpdateEntryRequest,
    user_id: str = Depends(get_current_user_id)
):
    collection = get_journal_collection()
    entry = get_owned_document(collection, entry_id, user_id, "Journal", action="update")

    update_data = request.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated_entry = collection.find_one_and_update(
        {"_id": entry["_id"]},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER
    )

    if updated_entry is None:
        raise HTTPException(status_code=404, detail="Journal not found")
    return populate_media([updated_entry])[0]


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id)
):
    collection = get_journal_collection()
    entry = get_owned_document(collection, entry_id, user_id, "Journal", action="delete")

    collection.delete_one({"_id": entry["_id"]})

    # Attached media stays on the host, only the link back to the entry goes
    get_media_collection().update_many(
        {"journal_id": entry["_id"]},
        {"$set": {"journal_id": None}}
    )
    logger.info("Deleted journal %s for user %s", entry["_id"], user_id)
    return None
