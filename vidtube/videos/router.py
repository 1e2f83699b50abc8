"""
FastAPI router for Videos system endpoints.

Provides video publishing and paginated listing.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from common.utils import success_response
from vidtube.config import Settings
from vidtube.dependencies import get_settings, get_video_service, require_auth
from vidtube.uploads import staged
from vidtube.videos.schemas import VideoListQuery
from vidtube.videos.services.video_service import VideoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("")
async def list_videos(
    params: Annotated[VideoListQuery, Depends()],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """
    List videos.

    Supports title search, owner filter, sorting and pagination.
    """
    result = await video_service.list_videos(
        page=params.page,
        limit=params.limit,
        query=params.query,
        sort_by=params.sortBy,
        sort_type=params.sortType,
        user_id=params.userId,
    )
    return success_response(result, message="Videos fetched successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def publish_video(
    user: Annotated[dict, Depends(require_auth)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    title: Annotated[Optional[str], Form()] = None,
    description: Annotated[Optional[str], Form()] = None,
    videoFile: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Publish a video.

    Multipart form with title, description and the `videoFile`.
    """
    async with staged(videoFile, settings.UPLOAD_TMP_DIR) as video_path:
        video = await video_service.publish_video(
            owner_id=user["_id"],
            title=title,
            description=description,
            local_path=video_path,
        )

    return success_response(video, message="Video published successfully", status_code=201)
