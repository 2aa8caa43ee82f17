# tests/unit/test_repositories.py
"""
Unit Tests for repositories
Watch history, video search, playlists and channel read models
"""

import asyncio

import pytest
import pytest_asyncio

from vidtube.infrastructure.repositories import (
    ChannelRepository,
    CommentRepository,
    LikeRepository,
    PlaylistRepository,
    SubscriptionRepository,
    UserRepository,
    VideoRepository,
)


# ============================================================================
# Test Fixtures
# ============================================================================


async def _make_user(session, name):
    return await UserRepository(session).create(
        username=name,
        email=f"{name}@example.com",
        fullname=name.title(),
        password_hash="x",
        avatar_url=f"https://media.test/{name}.png",
    )


async def _make_video(session, owner, title, views=0, published=True, duration=60):
    return await VideoRepository(session).create(
        owner_id=owner.id,
        title=title,
        description=f"{title} description",
        video_url=f"https://media.test/{title}.mp4",
        thumbnail_url=f"https://media.test/{title}.png",
        view_count=views,
        is_published=published,
        duration_seconds=duration,
    )


@pytest_asyncio.fixture
async def owner(db_session):
    return await _make_user(db_session, "owner")


@pytest_asyncio.fixture
async def viewer(db_session):
    return await _make_user(db_session, "viewer")


@pytest_asyncio.fixture
async def sample_videos(db_session, owner):
    videos = []
    for i, (title, views) in enumerate([("alpha", 5), ("beta cooking", 50), ("gamma", 500)]):
        videos.append(await _make_video(db_session, owner, title, views=views, duration=10 * (i + 1)))
    videos.append(await _make_video(db_session, owner, "draft", published=False))
    return videos


# ============================================================================
# Users
# ============================================================================


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_lookup_is_case_insensitive(self, db_session, owner):
        repo = UserRepository(db_session)

        assert (await repo.get_by_username("OWNER")).id == owner.id
        assert (await repo.get_by_username_or_email(email="Owner@Example.com")).id == owner.id
        assert await repo.get_by_username_or_email() is None

    @pytest.mark.asyncio
    async def test_rewatch_moves_video_to_front(self, db_session, viewer, sample_videos):
        repo = UserRepository(db_session)
        alpha, beta, gamma, _ = sample_videos

        for video in (alpha, beta, gamma):
            await repo.record_watch(viewer.id, video.id)
            await asyncio.sleep(0.01)
        await repo.record_watch(viewer.id, alpha.id)

        history = await repo.get_watch_history(viewer.id)

        assert [v.title for v in history] == ["alpha", "gamma", "beta"]
        assert history[0].owner.username == "owner"


# ============================================================================
# Videos
# ============================================================================


class TestVideoRepository:
    @pytest.mark.asyncio
    async def test_search_hides_unpublished(self, db_session, sample_videos):
        videos, total = await VideoRepository(db_session).search()

        assert total == 3
        assert "draft" not in [v.title for v in videos]

    @pytest.mark.asyncio
    async def test_search_owner_sees_drafts(self, db_session, owner, sample_videos):
        videos, total = await VideoRepository(db_session).search(
            owner_id=owner.id, published_only=False
        )
        assert total == 4

    @pytest.mark.asyncio
    async def test_search_query_and_sort(self, db_session, sample_videos):
        repo = VideoRepository(db_session)

        matched, total = await repo.search(query="COOKING")
        assert total == 1
        assert matched[0].title == "beta cooking"

        by_views, _ = await repo.search(sort_by="view_count", sort_type="asc")
        assert [v.view_count for v in by_views] == [5, 50, 500]

    @pytest.mark.asyncio
    async def test_search_wildcards_match_literally(self, db_session, owner, sample_videos):
        await _make_video(db_session, owner, "100% real")
        await _make_video(db_session, owner, "snake_case tips")
        repo = VideoRepository(db_session)

        percent, total = await repo.search(query="%")
        assert total == 1
        assert percent[0].title == "100% real"

        underscore, _ = await repo.search(query="_")
        assert [v.title for v in underscore] == ["snake_case tips"]

        nothing, total = await repo.search(query="\\")
        assert total == 0

    @pytest.mark.asyncio
    async def test_search_pagination(self, db_session, sample_videos):
        page, total = await VideoRepository(db_session).search(
            sort_by="title", sort_type="asc", skip=1, limit=1
        )
        assert total == 3
        assert [v.title for v in page] == ["beta cooking"]

    @pytest.mark.asyncio
    async def test_counters(self, db_session, sample_videos):
        repo = VideoRepository(db_session)
        alpha = sample_videos[0]

        viewed = await repo.increment_views(alpha.id)
        assert viewed.view_count == 6

        toggled = await repo.toggle_published(alpha.id)
        assert toggled.is_published is False
        toggled = await repo.toggle_published(alpha.id)
        assert toggled.is_published is True

    @pytest.mark.asyncio
    async def test_delete_cascades_to_comments_and_likes(
        self, db_session, viewer, sample_videos
    ):
        alpha = sample_videos[0]
        comments = CommentRepository(db_session)
        likes = LikeRepository(db_session, "video")
        await comments.create(video_id=alpha.id, owner_id=viewer.id, content="nice")
        await likes.create_relation(viewer.id, alpha.id)

        assert await VideoRepository(db_session).delete(alpha.id)

        assert await comments.count(video_id=alpha.id) == 0
        assert await likes.count_for_target(alpha.id) == 0


# ============================================================================
# Playlists
# ============================================================================


class TestPlaylistRepository:
    @pytest.mark.asyncio
    async def test_membership(self, db_session, owner, sample_videos):
        repo = PlaylistRepository(db_session)
        playlist = await repo.create(name="mix", description="", owner_id=owner.id)
        alpha, beta = sample_videos[0], sample_videos[1]

        assert await repo.add_video(playlist.id, beta.id) is True
        assert await repo.add_video(playlist.id, alpha.id) is True
        assert await repo.add_video(playlist.id, beta.id) is False

        assert [v.title for v in await repo.get_videos(playlist.id)] == ["beta cooking", "alpha"]
        assert await repo.count_videos([playlist.id]) == {playlist.id: 2}

        assert await repo.remove_video(playlist.id, beta.id) is True
        assert await repo.remove_video(playlist.id, beta.id) is False


# ============================================================================
# Channel Read Models
# ============================================================================


class TestChannelRepository:
    @pytest.mark.asyncio
    async def test_stats_for_empty_channel_are_zero(self, db_session, owner):
        stats = await ChannelRepository(db_session).get_channel_stats(owner.id)

        assert stats == {
            "totalVideos": 0,
            "totalViews": 0,
            "totalSubscribers": 0,
            "totalLikes": 0,
            "totalVideoLikes": 0,
            "totalComments": 0,
        }

    @pytest.mark.asyncio
    async def test_stats_aggregate(self, db_session, owner, viewer, sample_videos):
        alpha, beta = sample_videos[0], sample_videos[1]
        await SubscriptionRepository(db_session).create_relation(viewer.id, owner.id)
        likes = LikeRepository(db_session, "video")
        await likes.create_relation(viewer.id, alpha.id)
        await likes.create_relation(viewer.id, beta.id)
        await likes.create_relation(owner.id, alpha.id)
        await CommentRepository(db_session).create(
            video_id=beta.id, owner_id=viewer.id, content="hi"
        )

        stats = await ChannelRepository(db_session).get_channel_stats(owner.id)

        assert stats["totalVideos"] == 4
        assert stats["totalViews"] == 555
        assert stats["totalSubscribers"] == 1
        assert stats["totalLikes"] == 1
        assert stats["totalVideoLikes"] == 3
        assert stats["totalComments"] == 1

    @pytest.mark.asyncio
    async def test_profile_is_subscribed(self, db_session, owner, viewer):
        repo = ChannelRepository(db_session)

        before = await repo.get_channel_profile("owner", viewer.id)
        assert before["isSubscribed"] is False
        assert before["subscribersCount"] == 0

        await SubscriptionRepository(db_session).create_relation(viewer.id, owner.id)

        after = await repo.get_channel_profile("Owner", viewer.id)
        assert after["isSubscribed"] is True
        assert after["subscribersCount"] == 1
        assert after["channelsSubscribedToCount"] == 0

        anonymous = await repo.get_channel_profile("owner")
        assert anonymous["isSubscribed"] is False

        viewer_profile = await repo.get_channel_profile("viewer")
        assert viewer_profile["channelsSubscribedToCount"] == 1

    @pytest.mark.asyncio
    async def test_unknown_channel(self, db_session):
        assert await ChannelRepository(db_session).get_channel_profile("nobody") is None
