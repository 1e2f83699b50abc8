"""
Local staging of multipart uploads.

Incoming files are written to a temporary directory so media storage can
upload them from disk, and removed once the request is done.
"""

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def stage_upload(upload: Optional[UploadFile], tmp_dir: str) -> Optional[str]:
    """
    Write an uploaded file to the staging directory.

    Returns:
        Local path, or None when no file (or an empty one) was sent
    """
    if upload is None or not upload.filename:
        return None

    os.makedirs(tmp_dir, exist_ok=True)
    _, suffix = os.path.splitext(upload.filename)

    fd, path = tempfile.mkstemp(suffix=suffix, dir=tmp_dir)
    written = 0
    with os.fdopen(fd, "wb") as out:
        while chunk := await upload.read(CHUNK_SIZE):
            out.write(chunk)
            written += len(chunk)

    if written == 0:
        os.remove(path)
        return None

    logger.debug(f"Staged upload {upload.filename} ({written} bytes)")
    return path


def discard(path: Optional[str]) -> None:
    """Remove a staged file if it still exists."""
    if path and os.path.exists(path):
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove staged file {path}: {e}")


@asynccontextmanager
async def staged(upload: Optional[UploadFile], tmp_dir: str) -> AsyncIterator[Optional[str]]:
    """Stage an upload for the duration of a block, then delete it."""
    path = await stage_upload(upload, tmp_dir)
    try:
        yield path
    finally:
        discard(path)
