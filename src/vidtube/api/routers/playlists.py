"""
Playlist API Router
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from vidtube.api.forms import form_or_json
from vidtube.api.schemas import (
    PlaylistCreateRequest,
    PlaylistUpdateRequest,
    playlist_to_response,
    respond,
)
from vidtube.app.dependencies import get_current_user, get_optional_user, get_playlist_service
from vidtube.app.models import User
from vidtube.services import PlaylistService

router = APIRouter(prefix="/playlist", tags=["Playlists"])


@router.post("", status_code=201)
async def create_playlist(
    user: User = Depends(get_current_user),
    request: PlaylistCreateRequest = Depends(form_or_json(PlaylistCreateRequest)),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlist = await service.create_playlist(user, request.name, request.description)
    return respond(playlist_to_response(playlist), "Playlist created successfully", 201)


@router.get("/user/{user_id}")
async def get_user_playlists(
    user_id: str = Path(..., description="Owner (user) ID"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlists, counts = await service.get_user_playlists(user_id, page=page, limit=limit)
    return respond(
        [playlist_to_response(p, total_videos=counts.get(p.id, 0)) for p in playlists],
        "User playlists fetched successfully",
    )


@router.get("/{playlist_id}")
async def get_playlist_by_id(
    playlist_id: str = Path(..., description="Playlist ID"),
    viewer: Optional[User] = Depends(get_optional_user),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlist, videos = await service.get_playlist(playlist_id, viewer)
    return respond(playlist_to_response(playlist, videos=videos), "Playlist fetched successfully")


@router.patch("/add/{video_id}/{playlist_id}")
async def add_video_to_playlist(
    video_id: str = Path(..., description="Video ID"),
    playlist_id: str = Path(..., description="Playlist ID"),
    user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlist = await service.add_video(playlist_id, video_id, user)
    return respond(playlist_to_response(playlist), "Video added to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video_from_playlist(
    video_id: str = Path(..., description="Video ID"),
    playlist_id: str = Path(..., description="Playlist ID"),
    user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlist = await service.remove_video(playlist_id, video_id, user)
    return respond(playlist_to_response(playlist), "Video removed from playlist successfully")


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str = Path(..., description="Playlist ID"),
    user: User = Depends(get_current_user),
    request: PlaylistUpdateRequest = Depends(form_or_json(PlaylistUpdateRequest)),
    service: PlaylistService = Depends(get_playlist_service),
):
    playlist = await service.update_playlist(
        playlist_id, user, name=request.name, description=request.description
    )
    return respond(playlist_to_response(playlist), "Playlist updated successfully")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str = Path(..., description="Playlist ID"),
    user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
):
    await service.delete_playlist(playlist_id, user)
    return respond({}, "Playlist deleted successfully")
