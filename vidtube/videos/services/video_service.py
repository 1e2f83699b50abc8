"""
Video service for publishing and listing videos.

Videos are uploaded to media storage first; the record is written only once
the upload has returned its URL.
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.media.base import MediaStorage
from common.utils.exceptions import ValidationException
from vidtube.auth.services.credential_store import to_object_id

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("createdAt", "updatedAt", "title", "views", "duration")


def video_to_response(video: dict) -> dict:
    """Render ObjectIds of a video document as strings."""
    response = dict(video)
    response["_id"] = str(video["_id"])
    if isinstance(video.get("owner"), ObjectId):
        response["owner"] = str(video["owner"])
    return response


class VideoService:
    """
    Manages the `videos` collection.
    """

    DEFAULT_LIMIT = 10

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        media_storage: MediaStorage,
        max_limit: int = 100,
    ):
        """
        Initialize VideoService.

        Args:
            db: MongoDB database connection
            media_storage: For video file uploads
            max_limit: Largest page size a caller may request
        """
        self._db = db
        self._media = media_storage
        self._max_limit = max_limit
        self._videos_collection = db["videos"]

    async def publish_video(
        self,
        owner_id: str,
        title: Optional[str],
        description: Optional[str],
        local_path: Optional[str],
    ) -> dict:
        """
        Upload a video file and create its record.

        Args:
            owner_id: MongoDB ID of the publishing user
            title: Video title
            description: Video description
            local_path: Local path of the staged video file

        Returns:
            Created video document

        Raises:
            ValidationException: Missing title, description or file
            UploadException: Upload to media storage failed
        """
        missing = [
            name for name, value in (("title", title), ("description", description))
            if not (value or "").strip()
        ]
        if missing:
            raise ValidationException(
                message="Title and description are required",
                code="MISSING_FIELDS",
                errors=missing,
            )

        if not local_path:
            raise ValidationException(
                message="Video file is required",
                code="VIDEO_REQUIRED",
                errors=["videoFile"],
            )

        uploaded = await self._media.upload(local_path, resource_type="video")

        now = datetime.now(timezone.utc)
        video_doc = {
            "title": title.strip(),
            "description": description.strip(),
            "videoFile": uploaded.url,
            "publicId": uploaded.public_id,
            "duration": uploaded.duration,
            "owner": to_object_id(owner_id),
            "views": 0,
            "isPublished": True,
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._videos_collection.insert_one(video_doc)
        video_doc["_id"] = result.inserted_id

        logger.info(f"Video published: {result.inserted_id} by user {owner_id}")
        return video_to_response(video_doc)

    async def list_videos(
        self,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        query: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_type: str = "desc",
        user_id: Optional[str] = None,
    ) -> dict:
        """
        List videos with filtering, sorting and pagination.

        Args:
            page: 1-indexed page number
            limit: Page size, clamped to [1, max_limit]
            query: Case-insensitive title substring
            sort_by: One of SORTABLE_FIELDS
            sort_type: "asc" or "desc"
            user_id: Only videos owned by this user

        Returns:
            dict with keys:
                - videos: list of video documents
                - totalVideos: count matching the filter
                - page, limit: effective pagination values
        """
        page = max(int(page or 1), 1)
        limit = max(1, min(int(limit or self.DEFAULT_LIMIT), self._max_limit))

        if sort_by not in SORTABLE_FIELDS:
            raise ValidationException(
                message=f"Unsupported sort field. Allowed: {', '.join(SORTABLE_FIELDS)}",
                code="INVALID_SORT",
                errors=["sortBy"],
            )

        filters: dict = {}
        if query:
            filters["title"] = {"$regex": re.escape(query), "$options": "i"}
        if user_id:
            owner = to_object_id(user_id)
            if owner is None:
                raise ValidationException("Invalid userId", code="INVALID_USER_ID", errors=["userId"])
            filters["owner"] = owner

        direction = 1 if sort_type == "asc" else -1

        cursor = (
            self._videos_collection.find(filters)
            .sort(sort_by, direction)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        videos, total = await asyncio.gather(
            cursor.to_list(length=limit),
            self._videos_collection.count_documents(filters),
        )

        return {
            "videos": [video_to_response(v) for v in videos],
            "totalVideos": total,
            "page": page,
            "limit": limit,
        }
