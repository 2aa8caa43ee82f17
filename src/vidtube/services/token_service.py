"""
Token Service
Issues, verifies, rotates and revokes access/refresh token pairs
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import jwt

from vidtube.app.config import AuthConfig
from vidtube.app.models import User
from vidtube.infrastructure.repositories import UserRepository
from vidtube.services.base_service import BaseService
from vidtube.services.exceptions import AuthenticationError

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService(BaseService):
    """
    Session token operations

    Handles:
    - Signing short-lived access tokens and long-lived refresh tokens
    - Persisting the single valid refresh token per user
    - Rotation guarded by a compare-and-swap on the stored token
    """

    def __init__(self, user_repo: UserRepository, config: AuthConfig):
        super().__init__(config=config)
        self.user_repo = user_repo

    def get_service_name(self) -> str:
        return "token"

    # ========================================================================
    # Signing
    # ========================================================================

    def _encode(self, claims: Dict[str, Any], secret: str, lifetime) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + lifetime}
        return jwt.encode(payload, secret, algorithm=self.config.algorithm)

    def create_access_token(self, user: User) -> str:
        return self._encode(
            {
                "_id": user.id,
                "email": user.email,
                "username": user.username,
                "fullname": user.fullname,
                "type": ACCESS,
            },
            self.config.access_token_secret,
            self.config.access_token_lifetime,
        )

    def create_refresh_token(self, user_id: str) -> str:
        return self._encode(
            {"_id": user_id, "type": REFRESH, "jti": str(uuid.uuid4())},
            self.config.refresh_token_secret,
            self.config.refresh_token_lifetime,
        )

    def _decode(self, token: str, secret: str, expected_type: str, message: str) -> str:
        """
        Verify signature, expiry and token type

        Returns:
            User id embedded in the token

        Raises:
            AuthenticationError: On any verification failure
        """
        try:
            payload = jwt.decode(token, secret, algorithms=[self.config.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(f"{expected_type.capitalize()} token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError(message)

        user_id = payload.get("_id")
        if payload.get("type") != expected_type or not user_id:
            raise AuthenticationError(message)
        return str(user_id)

    # ========================================================================
    # Public Operations
    # ========================================================================

    async def issue_token_pair(self, user: User) -> TokenPair:
        """
        Create a new token pair and store its refresh token

        Any previously stored refresh token stops being accepted.
        """
        pair = TokenPair(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user.id),
        )
        await self.user_repo.set_refresh_token(user.id, pair.refresh_token)
        self.log_debug(f"Issued token pair for user {user.id}")
        return pair

    def verify_access(self, token: Optional[str]) -> str:
        """
        Check an access token without touching the store

        Args:
            token: Raw bearer/cookie value

        Returns:
            User id

        Raises:
            AuthenticationError: Invalid, expired or wrong-type token
        """
        if not token:
            raise AuthenticationError("Unauthorized request")
        return self._decode(
            token, self.config.access_token_secret, ACCESS, "Invalid access token"
        )

    async def refresh(self, incoming: Optional[str]) -> Tuple[User, TokenPair]:
        """
        Exchange a refresh token for a new pair

        Args:
            incoming: Refresh token presented by the client

        Returns:
            Tuple of (user, new token pair)

        Raises:
            AuthenticationError: Missing, invalid, expired, superseded or
                concurrently rotated token
        """
        if not incoming:
            raise AuthenticationError("Unauthorized request")

        user_id = self._decode(
            incoming, self.config.refresh_token_secret, REFRESH, "Invalid refresh token"
        )
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("Invalid refresh token")
        if user.refresh_token != incoming:
            self.log_warning(f"Rejected stale refresh token for user {user_id}")
            raise AuthenticationError("Refresh token is expired or used")

        pair = TokenPair(
            access_token=self.create_access_token(user),
            refresh_token=self.create_refresh_token(user.id),
        )
        if not await self.user_repo.swap_refresh_token(user.id, incoming, pair.refresh_token):
            raise AuthenticationError("Refresh token is expired or used")

        self.log_info(f"🔄 Rotated refresh token for user {user.id}")
        return user, pair

    async def revoke(self, user_id: str) -> None:
        """Clear the stored refresh token (idempotent)"""
        await self.user_repo.set_refresh_token(user_id, None)
        self.log_info(f"Revoked session for user {user_id}")
