# src/vidtube/infrastructure/clients/media_client.py
"""
Media Host Client
Uploads local files to Cloudinary over its REST API and deletes assets.

Features:
- Signed uploads (no SDK needed)
- Local staging file always removed after an upload attempt
- Failures reported as ``None`` so callers decide whether to abort
"""

import asyncio
import hashlib
import logging
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Protocol

import httpx

from vidtube.app.config import MediaConfig

logger = logging.getLogger(__name__)


# ============================================================================
# Data Containers
# ============================================================================


@dataclass(frozen=True)
class MediaAsset:
    """Result of a successful upload"""

    url: str
    public_id: str
    resource_type: str = "image"
    duration: Optional[float] = None


class MediaStore(Protocol):
    """Surface used by services; tests substitute an in-memory fake"""

    async def upload(self, local_path: Path) -> Optional[MediaAsset]: ...

    async def delete(self, public_id: str, resource_type: str = "image") -> bool: ...


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """
    Cloudinary request signature

    Parameters are sorted by name, joined as ``k=v`` pairs with ``&`` and the
    API secret is appended before hashing with SHA-1.
    """
    payload = "&".join(
        f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


# ============================================================================
# Main Client
# ============================================================================


class MediaClient:
    """
    Cloudinary upload client

    Handles:
    - Auto-typed uploads (image or video) into a configured folder
    - Asset deletion by public id
    """

    def __init__(self, config: MediaConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize media client

        Args:
            config: Media host settings
            client: Optional preconfigured httpx client (tests inject a mock transport)
        """
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=config.timeout_seconds)
        self._owns_client = client is None

    def _endpoint(self, resource_type: str, action: str) -> str:
        return f"{self.config.base_url}/{self.config.cloud_name}/{resource_type}/{action}"

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, self.config.api_secret)
        params["api_key"] = self.config.api_key
        return params

    async def upload(self, local_path: Path) -> Optional[MediaAsset]:
        """
        Upload a staged file and remove it locally

        Args:
            local_path: Path of the staged file

        Returns:
            MediaAsset on success, None on any failure
        """
        local_path = Path(local_path)
        try:
            if not self.config.is_configured:
                logger.error("❌ Media host credentials are not configured")
                return None

            content = await asyncio.to_thread(local_path.read_bytes)
            data = self._signed({"folder": self.config.folder, "use_filename": "true"})

            response = await self.client.post(
                self._endpoint("auto", "upload"),
                data=data,
                files={"file": (local_path.name, content)},
            )
            response.raise_for_status()
            body = response.json()

            asset = MediaAsset(
                url=body.get("secure_url") or body["url"],
                public_id=body["public_id"],
                resource_type=body.get("resource_type", "image"),
                duration=body.get("duration"),
            )
            logger.info(f"✅ Uploaded {local_path.name} -> {asset.url}")
            return asset

        except httpx.HTTPStatusError as e:
            logger.error(
                f"❌ Media upload rejected {e.response.status_code}: {e.response.text}"
            )
            return None
        except (httpx.HTTPError, OSError, KeyError, ValueError) as e:
            logger.error(f"❌ Media upload failed for {local_path.name}: {e}")
            return None
        finally:
            local_path.unlink(missing_ok=True)

    async def delete(self, public_id: str, resource_type: str = "image") -> bool:
        """
        Delete an asset

        Args:
            public_id: Asset id returned by upload
            resource_type: image or video

        Returns:
            True if the host confirmed the deletion
        """
        if not public_id:
            return False

        try:
            response = await self.client.post(
                self._endpoint(resource_type, "destroy"),
                data=self._signed({"public_id": public_id}),
            )
            response.raise_for_status()
            deleted = response.json().get("result") == "ok"
            if deleted:
                logger.info(f"🗑️ Deleted media asset {public_id}")
            else:
                logger.warning(f"⚠️ Media host did not delete {public_id}")
            return deleted
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ Failed to delete media asset {public_id}: {e}")
            return False

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


# ============================================================================
# Local Staging
# ============================================================================


def _copy_to(path: Path, source: BinaryIO) -> None:
    with open(path, "wb") as target:
        shutil.copyfileobj(source, target)


async def stage_upload(source: BinaryIO, filename: str, upload_dir: str) -> Path:
    """
    Persist an incoming upload stream to the staging directory

    Args:
        source: Readable binary stream (e.g. ``UploadFile.file``)
        filename: Original client filename
        upload_dir: Staging directory

    Returns:
        Path of the staged file
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    safe_name = Path(filename or "upload").name
    path = directory / f"{uuid.uuid4().hex}-{safe_name}"
    await asyncio.to_thread(_copy_to, path, source)
    return path
