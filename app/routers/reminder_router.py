from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from datetime import datetime
from pymongo import ASCENDING, ReturnDocument

from app.core.time_utils import utc_now, to_naive_utc
from app.db.database import get_reminder_collection
from app.models.reminder import (
    ReminderResponse, ReminderListResponse, NewReminderRequest, UpdateReminderRequest
)
from app.routers.auth_dependency import get_current_user_id, get_owned_document

router = APIRouter(
    prefix="/reminders",
    tags=["Reminders"],
    dependencies=[Depends(get_current_user_id)]
)


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    request: NewReminderRequest,
    user_id: str = Depends(get_current_user_id)
):
    new_reminder_data = {
        "user_id": user_id,
        "title": request.title,
        "description": request.description,
        "reminder_date": to_naive_utc(request.reminder_date),
        "is_recurring": request.is_recurring,
        "recurring_pattern": request.recurring_pattern,
        "is_active": True,
        "created_at": utc_now(),
    }
    result = get_reminder_collection().insert_one(new_reminder_data)
    new_reminder_data["_id"] = result.inserted_id
    return new_reminder_data


@router.get("", response_model=ReminderListResponse)
async def list_reminders(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    is_active: Optional[bool] = Query(None),
    is_recurring: Optional[bool] = Query(None),
    user_id: str = Depends(get_current_user_id)
):
    query = {"user_id": user_id}

    if start_date and end_date:
        query["reminder_date"] = {
            "$gte": to_naive_utc(start_date),
            "$lte": to_naive_utc(end_date),
        }
    if is_active is not None:
        query["is_active"] = is_active
    if is_recurring is not None:
        query["is_recurring"] = is_recurring

    reminders = list(get_reminder_collection().find(query).sort("reminder_date", ASCENDING))
    return ReminderListResponse(count=len(reminders), data=reminders)


@router.get("/{reminder_id}", response_model=ReminderResponse)
async def get_single_reminder(
    reminder_id: str,
    user_id: str = Depends(get_current_user_id)
):
    return get_owned_document(get_reminder_collection(), reminder_id, user_id, "Reminder")


@router.put("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(
    reminder_id: str,
    request: UpdateReminderRequest,
    user_id: str = Depends(get_current_user_id)
):
    collection = get_reminder_collection()
    reminder = get_owned_document(collection, reminder_id, user_id, "Reminder", action="update")

    update_data = request.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "reminder_date" in update_data:
        update_data["reminder_date"] = to_naive_utc(update_data["reminder_date"])

    # Validate the pattern against the reminder as it will be stored
    is_recurring = update_data.get("is_recurring", reminder.get("is_recurring", False))
    pattern = update_data.get("recurring_pattern", reminder.get("recurring_pattern"))
    if is_recurring and pattern is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="recurring_pattern is required for a recurring reminder",
        )
    if not is_recurring:
        update_data["recurring_pattern"] = None

    updated_reminder = collection.find_one_and_update(
        {"_id": reminder["_id"]},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER
    )

    if updated_reminder is None:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return updated_reminder


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(
    reminder_id: str,
    user_id: str = Depends(get_current_user_id)
):
    collection = get_reminder_collection()
    reminder = get_owned_document(collection, reminder_id, user_id, "Reminder", action="delete")
    collection.delete_one({"_id": reminder["_id"]})
    return None
