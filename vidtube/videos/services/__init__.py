"""Video services."""

from vidtube.videos.services.video_service import VideoService

__all__ = ["VideoService"]
