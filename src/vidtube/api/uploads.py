"""
Multipart upload staging
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

from fastapi import UploadFile

from vidtube.infrastructure.clients.media_client import stage_upload

logger = logging.getLogger(__name__)


@asynccontextmanager
async def staged_files(
    upload_dir: str, *files: Optional[UploadFile]
) -> AsyncIterator[List[Optional[Path]]]:
    """
    Write incoming files to the staging directory for the duration of a request

    Yields one path per file (None where no file was sent). Whatever the
    media client has not already consumed is removed on exit.

    Usage:
        async with staged_files(cfg.media.upload_dir, avatar, cover) as (avatar_path, cover_path):
            ...
    """
    paths: List[Optional[Path]] = []
    try:
        for upload in files:
            if upload is None or not upload.filename:
                paths.append(None)
                continue
            paths.append(await stage_upload(upload.file, upload.filename, upload_dir))
        yield paths
    finally:
        for path in paths:
            if path is not None and path.exists():
                path.unlink(missing_ok=True)
                logger.debug(f"Removed staged upload {path.name}")
