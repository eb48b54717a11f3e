from datetime import datetime
from enum import Enum
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from app.models.journal import Pagination, PyObjectId


class MediaType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"


class MediaResponse(BaseModel):
    id: PyObjectId = Field(alias="_id")
    user_id: str
    journal_id: Optional[PyObjectId] = None
    type: MediaType
    url: str
    public_id: str
    caption: str = ""
    file_size: int = 0
    mime_type: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={ObjectId: str}
    )


class MediaListResponse(BaseModel):
    count: int
    total: int
    pagination: Pagination
    data: List[MediaResponse]

