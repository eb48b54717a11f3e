from datetime import datetime
from typing import Annotated, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from app.core.recurrence import RecurringPattern
from app.models.journal import PyObjectId

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True)]


class ReminderResponse(BaseModel):
    id: PyObjectId = Field(alias="_id")
    user_id: str
    title: str
    description: Optional[str] = None
    reminder_date: datetime
    is_recurring: bool = False
    recurring_pattern: Optional[str] = None
    is_active: bool = True
    created_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={ObjectId: str}
    )


class NewReminderRequest(BaseModel):
    title: Title
    description: Optional[Description] = None
    reminder_date: datetime
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="after")
    def check_pattern(self):
        if self.is_recurring and self.recurring_pattern is None:
            raise ValueError("recurring_pattern is required for a recurring reminder")
        if not self.is_recurring:
            self.recurring_pattern = None
        return self


class UpdateReminderRequest(BaseModel):
    title: Optional[Title] = None
    description: Optional[Description] = None
    reminder_date: Optional[datetime] = None
    is_recurring: Optional[bool] = None
    recurring_pattern: Optional[RecurringPattern] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)


class ReminderListResponse(BaseModel):
    count: int
    data: List[ReminderResponse]
