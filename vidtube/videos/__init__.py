"""
Videos System

Publishing videos to media storage and listing them.
"""

from vidtube.videos.services import VideoService

__all__ = ["VideoService"]
