"""
External API Clients
"""

from .media_client import (
    MediaAsset,
    MediaClient,
    MediaStore,
    sign_params,
    stage_upload,
)

__all__ = [
    "MediaAsset",
    "MediaClient",
    "MediaStore",
    "sign_params",
    "stage_upload",
]
