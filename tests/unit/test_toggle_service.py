# tests/unit/test_toggle_service.py
"""
Unit Tests for ToggleRelationEngine
"""

from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

from vidtube.app.models import Like, Subscription
from vidtube.infrastructure.repositories import (
    LikeRepository,
    RelationExistsError,
    SubscriptionRepository,
    UserRepository,
    VideoRepository,
)
from vidtube.services import ToggleAction, ToggleRelationEngine


@pytest_asyncio.fixture
async def users(db_session):
    repo = UserRepository(db_session)
    created = []
    for name in ("alice", "bob"):
        created.append(
            await repo.create(
                username=name,
                email=f"{name}@example.com",
                fullname=name.title(),
                password_hash="x",
                avatar_url=f"https://media.test/{name}.png",
            )
        )
    return created


@pytest_asyncio.fixture
async def video(db_session, users):
    return await VideoRepository(db_session).create(
        owner_id=users[1].id,
        title="clip",
        description="desc",
        video_url="https://media.test/clip.mp4",
        thumbnail_url="https://media.test/clip.png",
    )


class TestToggleAgainstStore:
    @pytest.mark.asyncio
    async def test_subscription_toggles_three_times(self, db_session, users):
        alice, bob = users
        repo = SubscriptionRepository(db_session)
        engine = ToggleRelationEngine(repo)

        actions = [(await engine.toggle(alice.id, bob.id)).action for _ in range(3)]

        assert actions == [ToggleAction.CREATED, ToggleAction.DELETED, ToggleAction.CREATED]
        assert await repo.count(subscriber_id=alice.id, channel_id=bob.id) == 1

    @pytest.mark.asyncio
    async def test_video_like_toggle(self, db_session, users, video):
        alice, _ = users
        repo = LikeRepository(db_session, "video")
        engine = ToggleRelationEngine(repo)

        created = await engine.toggle(alice.id, video.id)
        assert created.created
        assert isinstance(created.relation, Like)
        assert await repo.count_for_target(video.id) == 1

        deleted = await engine.toggle(alice.id, video.id)
        assert deleted.action is ToggleAction.DELETED
        assert await repo.count_for_target(video.id) == 0

    @pytest.mark.asyncio
    async def test_duplicate_insert_is_rejected_by_store(self, db_session, users):
        alice_id, bob_id = users[0].id, users[1].id
        repo = SubscriptionRepository(db_session)

        await repo.create_relation(alice_id, bob_id)
        with pytest.raises(RelationExistsError):
            await repo.create_relation(alice_id, bob_id)

        assert await repo.count_for_target(bob_id) == 1


class TestToggleRace:
    @pytest.mark.asyncio
    async def test_lost_insert_race_reports_created(self):
        winner_row = Mock(spec=Subscription)
        repo = Mock()
        repo.kind = "subscription"
        repo.find_relation = AsyncMock(side_effect=[None, winner_row])
        repo.create_relation = AsyncMock(side_effect=RelationExistsError("subscription"))
        repo.delete = AsyncMock()

        result = await ToggleRelationEngine(repo).toggle("a", "b")

        assert result.action is ToggleAction.CREATED
        assert result.relation is winner_row
        repo.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_row_is_deleted(self):
        row = Mock(id="rel-1")
        repo = Mock()
        repo.kind = "like"
        repo.find_relation = AsyncMock(return_value=row)
        repo.delete = AsyncMock(return_value=True)
        repo.create_relation = AsyncMock()

        result = await ToggleRelationEngine(repo).toggle("a", "b")

        assert result.action is ToggleAction.DELETED
        repo.delete.assert_awaited_once_with("rel-1")
        repo.create_relation.assert_not_called()
