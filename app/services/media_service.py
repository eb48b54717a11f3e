import logging
import os
from dataclasses import dataclass
from typing import BinaryIO

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
    api_key=os.getenv("CLOUDINARY_API_KEY"),
    api_secret=os.getenv("CLOUDINARY_API_SECRET"),
    secure=True,
)

MAX_FILE_SIZE = 10 * 1024 * 1024
ROOT_FOLDER = "memory-journal"


class MediaStorageError(Exception):
    pass


@dataclass(frozen=True)
class StoredFile:
    url: str
    public_id: str
    size: int


def media_type_for(mime_type: str) -> str:
    """Map an upload's mime type to the media type we store; only image and audio are accepted."""
    if mime_type and mime_type.startswith("image"):
        return "image"
    if mime_type and mime_type.startswith("audio"):
        return "audio"
    raise ValueError("Only image and audio files are allowed!")


def resource_type_for(media_type: str) -> str:
    # Cloudinary files audio under "video"
    return "image" if media_type == "image" else "video"


def upload_file(file: BinaryIO, user_id: str, media_type: str) -> StoredFile:
    try:
        result = cloudinary.uploader.upload(
            file,
            resource_type=resource_type_for(media_type),
            folder=f"{ROOT_FOLDER}/{user_id}/{media_type}s",
        )
    except CloudinaryError as e:
        logger.error("Cloudinary upload failed for user %s: %s", user_id, e)
        raise MediaStorageError(str(e)) from e

    return StoredFile(
        url=result["secure_url"],
        public_id=result["public_id"],
        size=result.get("bytes", 0),
    )


def destroy_file(public_id: str, media_type: str) -> None:
    try:
        cloudinary.uploader.destroy(public_id, resource_type=resource_type_for(media_type))
    except CloudinaryError as e:
        logger.error("Cloudinary delete failed for %s: %s", public_id, e)
        raise MediaStorageError(str(e)) from e
