"""
VidTube application-specific code.

This package contains the video platform built on the common/ package:
- auth: credential store, session protocol, registration flow
- videos: video publishing and listing
- config: Application settings
"""

from vidtube.config import settings

__all__ = ["settings"]
