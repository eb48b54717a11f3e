from enum import Enum
from typing import Annotated, Any, List, Optional
from datetime import datetime

from bson import ObjectId
from pydantic import BaseModel, Field, GetCoreSchemaHandler, GetJsonSchemaHandler, ConfigDict, StringConstraints
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from app.core.analytics import Mood


class PyObjectId(ObjectId):

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:

        def validate_object_id(v: Any) -> ObjectId:
            if not ObjectId.is_valid(v):
                raise ValueError("Invalid objectid")
            return ObjectId(v)

        from_input_schema = core_schema.no_info_plain_validator_function(validate_object_id)

        return core_schema.json_or_python_schema(
            json_schema=from_input_schema,
            python_schema=core_schema.union_schema([
                core_schema.is_instance_schema(ObjectId),
                from_input_schema,
            ]),
            serialization=core_schema.to_string_ser_schema()
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {'type': 'string'}


class Category(str, Enum):
    PERSONAL = "personal"
    PROFESSIONAL = "professional"


Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class MediaRef(BaseModel):
    id: PyObjectId = Field(alias="_id")
    url: str
    type: str

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


# Returned to the client
class JournalEntryResponse(BaseModel):
    id: PyObjectId = Field(alias="_id")
    user_id: str
    title: str
    content: str
    category: Category
    mood: Mood = Mood.NEUTRAL
    tags: List[str] = []
    location: Optional[str] = None
    media: List[MediaRef] = []
    created_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={ObjectId: str}
    )


class NewEntryRequest(BaseModel):
    title: Title
    content: str = Field(min_length=1)
    category: Category
    # Detected from the content when left out
    mood: Optional[Mood] = None
    tags: List[Tag] = []
    location: Optional[Annotated[str, StringConstraints(strip_whitespace=True)]] = None

    model_config = ConfigDict(use_enum_values=True)


class UpdateEntryRequest(BaseModel):
    title: Optional[Title] = None
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[Category] = None
    mood: Optional[Mood] = None
    tags: Optional[List[Tag]] = None
    location: Optional[Annotated[str, StringConstraints(strip_whitespace=True)]] = None

    model_config = ConfigDict(use_enum_values=True)


class AnalyzeTextRequest(BaseModel):
    content: str


class AnalyzeTextResponse(BaseModel):
    mood: Mood


class PageLink(BaseModel):
    page: int
    limit: int


class Pagination(BaseModel):
    next: Optional[PageLink] = None
    prev: Optional[PageLink] = None


class JournalListResponse(BaseModel):
    count: int
    total: int
    pagination: Pagination
    data: List[JournalEntryResponse]
