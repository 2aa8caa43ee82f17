"""
User Service
Registration, login sessions, profile updates and channel read models
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError

from vidtube.app.models import User, Video
from vidtube.infrastructure.clients.media_client import MediaAsset, MediaStore
from vidtube.infrastructure.repositories import ChannelRepository, UserRepository
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import (
    AuthenticationError,
    MediaUploadError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from vidtube.services.token_service import TokenPair, TokenService

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


class UserService(BaseService):
    """
    User account operations

    Handles:
    - Registration with avatar/cover uploads
    - Login, logout and token refresh
    - Password, profile and image updates
    - Channel profile and watch history reads
    """

    def __init__(
        self,
        user_repo: UserRepository,
        channel_repo: ChannelRepository,
        token_service: TokenService,
        media: MediaStore,
        config=None,
    ):
        super().__init__(config=config)
        self.user_repo = user_repo
        self.channel_repo = channel_repo
        self.tokens = token_service
        self.media = media

    def get_service_name(self) -> str:
        return "user"

    # ========================================================================
    # Registration
    # ========================================================================

    async def register(
        self,
        fullname: str,
        email: str,
        username: str,
        password: str,
        avatar_path: Optional[Path],
        cover_image_path: Optional[Path] = None,
    ) -> User:
        """
        Create an account

        Args:
            fullname: Display name
            email: Unique email (case-insensitive)
            username: Unique handle (case-insensitive)
            password: Plain password, stored hashed
            avatar_path: Staged avatar file (required)
            cover_image_path: Staged cover image (optional)

        Returns:
            Created user

        Raises:
            ValidationError: Missing fields or avatar
            ResourceAlreadyExistsError: Username or email taken
            MediaUploadError: Media host failed
        """
        for value, name in (
            (fullname, "fullname"),
            (email, "email"),
            (username, "username"),
            (password, "password"),
        ):
            self.validate_required(value, name)
        self._validate_email(email)

        existing = await self.user_repo.get_by_username_or_email(username=username, email=email)
        if existing is not None:
            raise ResourceAlreadyExistsError(
                "User", message="User with email or username already exists"
            )

        if avatar_path is None:
            raise ValidationError("Avatar file is required", field="avatar")

        avatar = await self.media.upload(avatar_path)
        if avatar is None:
            raise MediaUploadError("Failed to upload avatar")

        cover: Optional[MediaAsset] = None
        if cover_image_path is not None:
            cover = await self.media.upload(cover_image_path)
            if cover is None:
                await self.media.delete(avatar.public_id)
                raise MediaUploadError("Failed to upload cover image")

        try:
            user = await self.user_repo.create(
                fullname=fullname.strip(),
                email=email.strip().lower(),
                username=username.strip().lower(),
                password_hash=hash_password(password),
                avatar_url=avatar.url,
                avatar_public_id=avatar.public_id,
                cover_image_url=cover.url if cover else None,
                cover_image_public_id=cover.public_id if cover else None,
            )
        except Exception as e:
            await self.media.delete(avatar.public_id)
            if cover:
                await self.media.delete(cover.public_id)
            if isinstance(e, IntegrityError):
                # Lost a race with a concurrent registration
                raise ResourceAlreadyExistsError(
                    "User", message="User with email or username already exists"
                ) from e
            raise self.handle_error(e, "register_user", {"username": username})

        self.log_info(f"✅ Registered user {user.username}")
        return user

    @staticmethod
    def _validate_email(email: str) -> None:
        local, _, domain = email.strip().partition("@")
        if not local or "." not in domain:
            raise ValidationError("Invalid email", field="email")

    # ========================================================================
    # Session
    # ========================================================================

    async def login(
        self, password: str, username: Optional[str] = None, email: Optional[str] = None
    ) -> Tuple[User, TokenPair]:
        """
        Authenticate with username or email and issue a token pair

        Raises:
            ValidationError: Neither username nor email given
            ResourceNotFoundError: No such user
            AuthenticationError: Wrong password
        """
        if not (username and username.strip()) and not (email and email.strip()):
            raise ValidationError("username or email is required")
        self.validate_required(password, "password")

        user = await self.user_repo.get_by_username_or_email(username=username, email=email)
        if user is None:
            raise ResourceNotFoundError("User", message="User does not exist")

        if not verify_password(password, user.password_hash):
            self.log_warning(f"Failed login for {user.username}")
            raise AuthenticationError("Invalid user credentials")

        pair = await self.tokens.issue_token_pair(user)
        self.log_info(f"🔑 User logged in: {user.username}")
        return user, pair

    async def logout(self, user: User) -> None:
        await self.tokens.revoke(user.id)

    async def refresh_session(self, incoming: Optional[str]) -> TokenPair:
        _, pair = await self.tokens.refresh(incoming)
        return pair

    # ========================================================================
    # Account Updates
    # ========================================================================

    async def change_password(self, user: User, old_password: str, new_password: str) -> None:
        self.validate_required(old_password, "oldPassword")
        self.validate_required(new_password, "newPassword")

        if not verify_password(old_password, user.password_hash):
            raise ValidationError("Invalid old password", field="oldPassword")

        await self.user_repo.update(user.id, password_hash=hash_password(new_password))
        self.log_info(f"Password changed for {user.username}")

    async def update_account(self, user: User, fullname: str, email: str) -> User:
        """
        Update display name and email

        Raises:
            ValidationError: Missing or malformed fields
            ResourceAlreadyExistsError: Email belongs to another user
        """
        self.validate_required(fullname, "fullname")
        self.validate_required(email, "email")
        self._validate_email(email)

        email = email.strip().lower()
        owner = await self.user_repo.get_by_email(email)
        if owner is not None and owner.id != user.id:
            raise ResourceAlreadyExistsError("User", message="Email is already in use")

        user_id = user.id
        try:
            updated = await self.user_repo.update(user_id, fullname=fullname.strip(), email=email)
        except IntegrityError as e:
            raise ResourceAlreadyExistsError("User", message="Email is already in use") from e
        if updated is None:
            raise ResourceNotFoundError("User", user_id)
        return updated

    async def update_avatar(self, user: User, avatar_path: Optional[Path]) -> User:
        return await self._replace_image(user, avatar_path, "avatar")

    async def update_cover_image(self, user: User, cover_image_path: Optional[Path]) -> User:
        return await self._replace_image(user, cover_image_path, "cover_image")

    async def _replace_image(self, user: User, path: Optional[Path], kind: str) -> User:
        label = kind.replace("_", " ")
        if path is None:
            raise ValidationError(f"{label.capitalize()} file is missing", field=kind)

        asset = await self.media.upload(path)
        if asset is None:
            raise MediaUploadError(f"Failed to upload {label}")

        previous = getattr(user, f"{kind}_public_id")
        updated = await self.user_repo.update(
            user.id, **{f"{kind}_url": asset.url, f"{kind}_public_id": asset.public_id}
        )
        if updated is None:
            await self.media.delete(asset.public_id)
            raise ResourceNotFoundError("User", user.id)

        if previous:
            await self.media.delete(previous)
        self.log_info(f"Updated {label} for {user.username}")
        return updated

    # ========================================================================
    # Read Models
    # ========================================================================

    async def get_channel_profile(
        self, username: Optional[str], viewer_id: Optional[str] = None
    ) -> Dict[str, Any]:
        if not username or not username.strip():
            raise ValidationError("username is missing", field="username")

        profile = await self.channel_repo.get_channel_profile(username, viewer_id)
        if profile is None:
            raise ResourceNotFoundError("Channel", message="channel does not exist")
        return profile

    async def get_watch_history(self, user: User) -> List[Video]:
        return await self.user_repo.get_watch_history(user.id)
