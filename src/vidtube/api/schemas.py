"""
API Schemas
Request bodies, the response envelope and ORM-to-payload projections
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import inspect

from vidtube.app.models import Comment, Playlist, Tweet, User, Video

T = TypeVar("T")


# ============================================================================
# Envelope
# ============================================================================


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint"""

    statusCode: int = Field(default=200, description="HTTP status code")
    data: Optional[T] = Field(default=None, description="Response payload")
    message: str = Field(default="Success", description="Human readable message")
    success: bool = Field(default=True, description="True for 2xx/3xx responses")


class ApiError(BaseModel):
    """Error envelope produced by the exception handlers"""

    statusCode: int
    message: str
    errors: List[Any] = Field(default_factory=list)
    success: bool = False
    stack: Optional[str] = None


def respond(data: Any = None, message: str = "Success", status_code: int = 200) -> JSONResponse:
    """
    Wrap a payload in the success envelope

    Args:
        data: JSON-compatible payload
        message: Human readable message
        status_code: HTTP status

    Returns:
        JSONResponse ready for cookies/headers to be attached
    """
    envelope = ApiResponse[Any](
        statusCode=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope))


# ============================================================================
# Request Bodies
# ============================================================================


class LoginRequest(BaseModel):
    username: Optional[str] = Field(default=None, description="Username")
    email: Optional[str] = Field(default=None, description="Email")
    password: str = Field(..., description="Password")


class RefreshTokenRequest(BaseModel):
    refreshToken: Optional[str] = Field(default=None, description="Refresh token")


class ChangePasswordRequest(BaseModel):
    oldPassword: str
    newPassword: str


class UpdateAccountRequest(BaseModel):
    fullname: str
    email: str


class ContentRequest(BaseModel):
    """Body for comments and tweets"""

    content: str = Field(..., description="Text content")


class PlaylistCreateRequest(BaseModel):
    name: str = Field(..., description="Playlist name")
    description: str = Field(default="", description="Playlist description")


class PlaylistUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None


# ============================================================================
# Projections
# ============================================================================


def _is_loaded(instance: Any, attribute: str) -> bool:
    # Touching an unloaded relationship would trigger IO outside the event loop
    return attribute not in inspect(instance).unloaded


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def user_to_response(user: User) -> Dict[str, Any]:
    """Public user fields; password hash and refresh token are never exposed"""
    return user.to_dict()


def owner_summary(user: Optional[User]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "fullname": user.fullname,
        "username": user.username,
        "avatar": user.avatar_url,
    }


def video_to_response(video: Video, **extra: Any) -> Dict[str, Any]:
    payload = video.to_dict()
    payload["updatedAt"] = _iso(video.updated_at)
    if _is_loaded(video, "owner") and video.owner is not None:
        payload["owner"] = owner_summary(video.owner)
    payload.update(extra)
    return payload


def comment_to_response(comment: Comment, likes_count: Optional[int] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": comment.id,
        "content": comment.content,
        "video": comment.video_id,
        "owner": comment.owner_id,
        "createdAt": _iso(comment.created_at),
        "updatedAt": _iso(comment.updated_at),
    }
    if _is_loaded(comment, "owner") and comment.owner is not None:
        payload["owner"] = owner_summary(comment.owner)
    if likes_count is not None:
        payload["likesCount"] = likes_count
    return payload


def tweet_to_response(tweet: Tweet, likes_count: Optional[int] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": tweet.id,
        "content": tweet.content,
        "owner": tweet.owner_id,
        "createdAt": _iso(tweet.created_at),
        "updatedAt": _iso(tweet.updated_at),
    }
    if likes_count is not None:
        payload["likesCount"] = likes_count
    return payload


def playlist_to_response(
    playlist: Playlist,
    videos: Optional[List[Video]] = None,
    total_videos: Optional[int] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": playlist.id,
        "name": playlist.name,
        "description": playlist.description,
        "owner": playlist.owner_id,
        "createdAt": _iso(playlist.created_at),
        "updatedAt": _iso(playlist.updated_at),
    }
    if videos is not None:
        payload["videos"] = [video_to_response(v) for v in videos]
        payload["totalVideos"] = len(videos)
    elif total_videos is not None:
        payload["totalVideos"] = total_videos
    return payload


def paginated(items: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    """Page metadata in the shape list endpoints return"""
    return {
        "docs": items,
        "totalDocs": total,
        "page": page,
        "limit": limit,
        "totalPages": (total + limit - 1) // limit if limit else 0,
    }
