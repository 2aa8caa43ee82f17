"""
User API Router
Registration, session management, account updates and channel profile
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Path, Request, UploadFile
from fastapi.responses import JSONResponse

from vidtube.api.forms import form_or_json
from vidtube.api.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    UpdateAccountRequest,
    respond,
    user_to_response,
    video_to_response,
)
from vidtube.api.uploads import staged_files
from vidtube.app.config import Config
from vidtube.app.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_app_config,
    get_current_user,
    get_optional_user,
    get_user_service,
)
from vidtube.app.models import User
from vidtube.services import TokenPair, UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


# ============================================================================
# Cookie Helpers
# ============================================================================


def _set_auth_cookies(response: JSONResponse, pair: TokenPair, config: Config) -> None:
    for name, value in ((ACCESS_COOKIE, pair.access_token), (REFRESH_COOKIE, pair.refresh_token)):
        response.set_cookie(name, value, httponly=True, secure=config.auth.cookie_secure)


def _clear_auth_cookies(response: JSONResponse, config: Config) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, httponly=True, secure=config.auth.cookie_secure)


# ============================================================================
# Registration & Session
# ============================================================================


@router.post("/register", status_code=201)
async def register_user(
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    coverImage: Optional[UploadFile] = File(None),
    service: UserService = Depends(get_user_service),
    config: Config = Depends(get_app_config),
):
    """
    Create an account

    - **avatar**: required image
    - **coverImage**: optional image
    """
    async with staged_files(config.media.upload_dir, avatar, coverImage) as (avatar_path, cover_path):
        user = await service.register(
            fullname=fullname,
            email=email,
            username=username,
            password=password,
            avatar_path=avatar_path,
            cover_image_path=cover_path,
        )
    return respond(user_to_response(user), "User registered successfully", 201)


@router.post("/login")
async def login_user(
    request: LoginRequest = Depends(form_or_json(LoginRequest)),
    service: UserService = Depends(get_user_service),
    config: Config = Depends(get_app_config),
):
    """Log in with username or email; sets auth cookies"""
    user, pair = await service.login(
        password=request.password, username=request.username, email=request.email
    )
    response = respond(
        {
            "user": user_to_response(user),
            "accessToken": pair.access_token,
            "refreshToken": pair.refresh_token,
        },
        "User logged in successfully",
    )
    _set_auth_cookies(response, pair, config)
    return response


@router.post("/logout")
async def logout_user(
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
    config: Config = Depends(get_app_config),
):
    await service.logout(user)
    response = respond({}, "User logged out")
    _clear_auth_cookies(response, config)
    return response


@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    body: Optional[RefreshTokenRequest] = Depends(
        form_or_json(RefreshTokenRequest, required=False)
    ),
    service: UserService = Depends(get_user_service),
    config: Config = Depends(get_app_config),
):
    """Rotate the token pair; the refresh token comes from cookie or body"""
    incoming = request.cookies.get(REFRESH_COOKIE) or (body.refreshToken if body else None)
    pair = await service.refresh_session(incoming)
    response = respond(
        {"accessToken": pair.access_token, "refreshToken": pair.refresh_token},
        "Access token refreshed",
    )
    _set_auth_cookies(response, pair, config)
    return response


# ============================================================================
# Account
# ============================================================================


@router.post("/change-password")
async def change_password(
    user: User = Depends(get_current_user),
    request: ChangePasswordRequest = Depends(form_or_json(ChangePasswordRequest)),
    service: UserService = Depends(get_user_service),
):
    await service.change_password(user, request.oldPassword, request.newPassword)
    return respond({}, "Password changed successfully")


@router.get("/current-user")
async def get_current_user_profile(user: User = Depends(get_current_user)):
    return respond(user_to_response(user), "User fetched successfully")


@router.patch("/update-account")
async def update_account_details(
    user: User = Depends(get_current_user),
    request: UpdateAccountRequest = Depends(form_or_json(UpdateAccountRequest)),
    service: UserService = Depends(get_user_service),
):
    updated = await service.update_account(user, request.fullname, request.email)
    return respond(user_to_response(updated), "Account details updated successfully")


@router.patch("/avatar")
async def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
    config: Config = Depends(get_app_config),
):
    async with staged_files(config.media.upload_dir, avatar) as (avatar_path,):
        updated = await service.update_avatar(user, avatar_path)
    return respond(user_to_response(updated), "Avatar updated successfully")


@router.patch("/cover-image")
async def update_cover_image(
    coverImage: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
    config: Config = Depends(get_app_config),
):
    async with staged_files(config.media.upload_dir, coverImage) as (cover_path,):
        updated = await service.update_cover_image(user, cover_path)
    return respond(user_to_response(updated), "Cover image updated successfully")


# ============================================================================
# Channel Read Models
# ============================================================================


@router.get("/c/{username}")
async def get_user_channel_profile(
    username: str = Path(..., description="Channel username"),
    viewer: Optional[User] = Depends(get_optional_user),
    service: UserService = Depends(get_user_service),
):
    profile = await service.get_channel_profile(username, viewer.id if viewer else None)
    return respond(profile, "User channel fetched successfully")


@router.get("/history")
async def get_watch_history(
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    videos = await service.get_watch_history(user)
    return respond([video_to_response(v) for v in videos], "Watch history fetched successfully")
