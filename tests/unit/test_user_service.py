# tests/unit/test_user_service.py
"""
Unit Tests for UserService
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from vidtube.infrastructure.repositories import ChannelRepository, UserRepository
from vidtube.services import (
    ResourceAlreadyExistsError,
    TokenService,
    UserService,
    hash_password,
)


def _stage(directory, name):
    path = directory / name
    path.write_bytes(b"image bytes")
    return path


async def _make_user(session, name):
    return await UserRepository(session).create(
        username=name,
        email=f"{name}@example.com",
        fullname=name.title(),
        password_hash=hash_password("s3cret-pass"),
        avatar_url=f"https://media.test/{name}.png",
    )


@pytest.fixture
def staging(tmp_path):
    directory = tmp_path / "staging"
    directory.mkdir()
    return directory


@pytest.fixture
def service(db_session, media, config):
    user_repo = UserRepository(db_session)
    return UserService(
        user_repo=user_repo,
        channel_repo=ChannelRepository(db_session),
        token_service=TokenService(user_repo, config.auth),
        media=media,
        config=config,
    )


@pytest_asyncio.fixture
async def alice(db_session):
    return await _make_user(db_session, "alice")


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_stores_lowercased_identity(self, service, staging):
        user = await service.register(
            "Bob Builder", "Bob@Example.com", "BOB", "pw", _stage(staging, "avatar.png")
        )

        assert user.username == "bob"
        assert user.email == "bob@example.com"
        assert user.password_hash != "pw"

    @pytest.mark.asyncio
    async def test_duplicate_found_before_upload(self, service, alice, staging, media):
        with pytest.raises(ResourceAlreadyExistsError):
            await service.register(
                "Alice", "new@example.com", "Alice", "pw", _stage(staging, "avatar.png")
            )

        assert media.uploaded == []

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_insert_is_conflict(self, service, alice, staging, media):
        # Another request inserted the username after the lookup ran
        service.user_repo.get_by_username_or_email = AsyncMock(return_value=None)

        with pytest.raises(ResourceAlreadyExistsError) as exc_info:
            await service.register(
                "Alice Again", "other@example.com", "ALICE", "pw", _stage(staging, "avatar.png")
            )

        assert exc_info.value.status_code == 409
        assert media.deleted == [(media.uploaded[0].public_id, "image")]


class TestUpdateAccount:
    @pytest.mark.asyncio
    async def test_concurrent_email_claim_is_conflict(self, service, db_session, alice):
        bob = await _make_user(db_session, "bob")
        service.user_repo.get_by_email = AsyncMock(return_value=None)

        with pytest.raises(ResourceAlreadyExistsError, match="Email is already in use") as exc_info:
            await service.update_account(bob, "Bob", "alice@example.com")

        assert exc_info.value.status_code == 409
