# tests/api/test_resources_api.py
"""
API Tests for videos, social relations, playlists and the dashboard
"""

import uuid

import pytest

from conftest import API, publish, signup


class TestVideosAPI:
    @pytest.mark.asyncio
    async def test_video_lifecycle(self, client, media):
        alice = await signup(client, "alice")

        video = await publish(client, alice, title="First", description="hello world")
        assert video["title"] == "First"
        assert video["duration"] == 13
        assert video["isPublished"] is True
        assert video["owner"]["username"] == "alice"

        fetched = await client.get(f"{API}/videos/{video['id']}", headers=alice["headers"])
        assert fetched.status_code == 200
        assert fetched.json()["data"]["views"] == 1
        assert fetched.json()["data"]["isLiked"] is False

        updated = await client.patch(
            f"{API}/videos/{video['id']}", data={"title": "Renamed"}, headers=alice["headers"]
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["title"] == "Renamed"
        assert updated.json()["data"]["description"] == "hello world"

        deleted = await client.delete(f"{API}/videos/{video['id']}", headers=alice["headers"])
        assert deleted.status_code == 200
        assert any(resource == "video" for _, resource in media.deleted)

        gone = await client.get(f"{API}/videos/{video['id']}")
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_and_unknown_ids(self, client):
        malformed = await client.get(f"{API}/videos/not-an-id")
        assert malformed.status_code == 400
        assert malformed.json()["message"] == "Invalid videoId"

        unknown = await client.get(f"{API}/videos/{uuid.uuid4()}")
        assert unknown.status_code == 404

    @pytest.mark.asyncio
    async def test_upload_failure_creates_nothing(self, client, media):
        alice = await signup(client, "alice")
        media.fail_markers.add("clip")

        response = await client.post(
            f"{API}/videos",
            data={"title": "t", "description": "d"},
            files={
                "videoFile": ("clip.mp4", b"bytes", "video/mp4"),
                "thumbnail": ("thumb.png", b"bytes", "image/png"),
            },
            headers=alice["headers"],
        )

        assert response.status_code == 502
        listing = await client.get(f"{API}/videos")
        assert listing.json()["data"]["totalDocs"] == 0

    @pytest.mark.asyncio
    async def test_only_owner_may_modify(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        video = await publish(client, alice)

        response = await client.delete(f"{API}/videos/{video['id']}", headers=bob["headers"])

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unpublished_hidden_from_listing(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        hidden = await publish(client, alice, title="hidden")
        await publish(client, alice, title="visible")

        toggled = await client.patch(
            f"{API}/videos/toggle/publish/{hidden['id']}", headers=alice["headers"]
        )
        assert toggled.json()["data"]["isPublished"] is False

        public = await client.get(f"{API}/videos", params={"userId": alice["id"]}, headers=bob["headers"])
        assert [v["title"] for v in public.json()["data"]["docs"]] == ["visible"]

        own = await client.get(f"{API}/videos", params={"userId": alice["id"]}, headers=alice["headers"])
        assert own.json()["data"]["totalDocs"] == 2

        direct = await client.get(f"{API}/videos/{hidden['id']}", headers=bob["headers"])
        assert direct.status_code == 404

    @pytest.mark.asyncio
    async def test_listing_search_and_pagination(self, client):
        alice = await signup(client, "alice")
        for title in ("Cooking pasta", "Cooking rice", "Gardening"):
            await publish(client, alice, title=title)

        response = await client.get(
            f"{API}/videos",
            params={"query": "cooking", "sortBy": "title", "sortType": "asc", "limit": 1, "page": 2},
        )
        data = response.json()["data"]

        assert data["totalDocs"] == 2
        assert data["totalPages"] == 2
        assert [v["title"] for v in data["docs"]] == ["Cooking rice"]

    @pytest.mark.asyncio
    async def test_watch_history(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        first = await publish(client, alice, title="one")
        second = await publish(client, alice, title="two")

        for video in (first, second, first):
            await client.get(f"{API}/videos/{video['id']}", headers=bob["headers"])

        history = await client.get(f"{API}/users/history", headers=bob["headers"])
        assert [v["id"] for v in history.json()["data"]] == [first["id"], second["id"]]


class TestLikesAndComments:
    @pytest.mark.asyncio
    async def test_video_like_toggles(self, client):
        alice = await signup(client, "alice")
        video = await publish(client, alice)
        url = f"{API}/likes/toggle/v/{video['id']}"

        states = []
        for _ in range(3):
            response = await client.post(url, headers=alice["headers"])
            states.append(response.json()["data"]["isLiked"])

        assert states == [True, False, True]
        liked = await client.get(f"{API}/likes/videos", headers=alice["headers"])
        assert [v["id"] for v in liked.json()["data"]] == [video["id"]]

    @pytest.mark.asyncio
    async def test_comment_flow(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        video = await publish(client, alice)

        created = await client.post(
            f"{API}/comments/{video['id']}", json={"content": "Nice!"}, headers=bob["headers"]
        )
        assert created.status_code == 201
        comment_id = created.json()["data"]["id"]

        like = await client.post(f"{API}/likes/toggle/c/{comment_id}", headers=alice["headers"])
        assert like.json()["data"]["action"] == "created"

        listing = await client.get(f"{API}/comments/{video['id']}")
        docs = listing.json()["data"]["docs"]
        assert docs[0]["content"] == "Nice!"
        assert docs[0]["likesCount"] == 1
        assert docs[0]["owner"]["username"] == "bob"

        forbidden = await client.patch(
            f"{API}/comments/c/{comment_id}", json={"content": "edit"}, headers=alice["headers"]
        )
        assert forbidden.status_code == 403

        edited = await client.patch(
            f"{API}/comments/c/{comment_id}", json={"content": "Edited"}, headers=bob["headers"]
        )
        assert edited.json()["data"]["content"] == "Edited"

        removed = await client.delete(f"{API}/comments/c/{comment_id}", headers=bob["headers"])
        assert removed.status_code == 200

    @pytest.mark.asyncio
    async def test_empty_comment_rejected(self, client):
        alice = await signup(client, "alice")
        video = await publish(client, alice)

        response = await client.post(
            f"{API}/comments/{video['id']}", json={"content": "   "}, headers=alice["headers"]
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unpublished_video_hidden_from_other_users(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        video = await publish(client, alice)
        await client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=alice["headers"])

        like = await client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob["headers"])
        assert like.status_code == 404

        comment = await client.post(
            f"{API}/comments/{video['id']}", json={"content": "hi"}, headers=bob["headers"]
        )
        assert comment.status_code == 404
        assert (await client.get(f"{API}/comments/{video['id']}")).status_code == 404

        playlist = await client.post(f"{API}/playlist", json={"name": "Mine"}, headers=bob["headers"])
        playlist_id = playlist.json()["data"]["id"]
        added = await client.patch(
            f"{API}/playlist/add/{video['id']}/{playlist_id}", headers=bob["headers"]
        )
        assert added.status_code == 404

        own_like = await client.post(f"{API}/likes/toggle/v/{video['id']}", headers=alice["headers"])
        assert own_like.json()["data"]["isLiked"] is True


class TestSubscriptionsAPI:
    @pytest.mark.asyncio
    async def test_subscribe_unsubscribe(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        url = f"{API}/subscriptions/c/{bob['id']}"

        first = await client.post(url, headers=alice["headers"])
        assert first.json()["data"] == {"subscribed": True, "action": "created"}

        subscribers = await client.get(url, headers=alice["headers"])
        assert [s["username"] for s in subscribers.json()["data"]] == ["alice"]

        channels = await client.get(f"{API}/subscriptions/u/{alice['id']}", headers=alice["headers"])
        assert [c["username"] for c in channels.json()["data"]] == ["bob"]

        second = await client.post(url, headers=alice["headers"])
        assert second.json()["data"]["subscribed"] is False

        subscribers = await client.get(url, headers=alice["headers"])
        assert subscribers.json()["data"] == []

    @pytest.mark.asyncio
    async def test_self_subscription_rejected(self, client):
        alice = await signup(client, "alice")

        response = await client.post(f"{API}/subscriptions/c/{alice['id']}", headers=alice["headers"])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_channel_profile_reflects_viewer(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        await client.post(f"{API}/subscriptions/c/{bob['id']}", headers=alice["headers"])

        as_alice = await client.get(f"{API}/users/c/BOB", headers=alice["headers"])
        profile = as_alice.json()["data"]
        assert profile["subscribersCount"] == 1
        assert profile["channelsSubscribedToCount"] == 0
        assert profile["isSubscribed"] is True

        anonymous = await client.get(f"{API}/users/c/bob")
        assert anonymous.json()["data"]["isSubscribed"] is False

        missing = await client.get(f"{API}/users/c/nobody")
        assert missing.status_code == 404


class TestPlaylistsAPI:
    @pytest.mark.asyncio
    async def test_membership(self, client):
        alice = await signup(client, "alice")
        video = await publish(client, alice)

        created = await client.post(
            f"{API}/playlist", json={"name": "Favourites"}, headers=alice["headers"]
        )
        assert created.status_code == 201
        playlist_id = created.json()["data"]["id"]
        add_url = f"{API}/playlist/add/{video['id']}/{playlist_id}"
        remove_url = f"{API}/playlist/remove/{video['id']}/{playlist_id}"

        assert (await client.patch(add_url, headers=alice["headers"])).status_code == 200
        duplicate = await client.patch(add_url, headers=alice["headers"])
        assert duplicate.status_code == 409
        assert duplicate.json()["message"] == "Video already exists in playlist"

        fetched = await client.get(f"{API}/playlist/{playlist_id}")
        assert fetched.json()["data"]["totalVideos"] == 1

        listing = await client.get(f"{API}/playlist/user/{alice['id']}")
        assert listing.json()["data"][0]["totalVideos"] == 1

        assert (await client.patch(remove_url, headers=alice["headers"])).status_code == 200
        absent = await client.patch(remove_url, headers=alice["headers"])
        assert absent.status_code == 404

    @pytest.mark.asyncio
    async def test_other_user_cannot_edit(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        created = await client.post(f"{API}/playlist", json={"name": "Mine"}, headers=alice["headers"])
        playlist_id = created.json()["data"]["id"]

        response = await client.patch(
            f"{API}/playlist/{playlist_id}", json={"name": "Stolen"}, headers=bob["headers"]
        )
        assert response.status_code == 403

        renamed = await client.patch(
            f"{API}/playlist/{playlist_id}", json={"name": "Renamed"}, headers=alice["headers"]
        )
        assert renamed.json()["data"]["name"] == "Renamed"


class TestTweetsAPI:
    @pytest.mark.asyncio
    async def test_tweet_flow(self, client):
        alice = await signup(client, "alice")

        created = await client.post(f"{API}/tweets", json={"content": "hello"}, headers=alice["headers"])
        assert created.status_code == 201
        tweet_id = created.json()["data"]["id"]

        await client.post(f"{API}/likes/toggle/t/{tweet_id}", headers=alice["headers"])
        listing = await client.get(f"{API}/tweets/user/{alice['id']}")
        assert listing.json()["data"][0]["likesCount"] == 1

        updated = await client.patch(
            f"{API}/tweets/{tweet_id}", json={"content": "edited"}, headers=alice["headers"]
        )
        assert updated.json()["data"]["content"] == "edited"

        assert (await client.delete(f"{API}/tweets/{tweet_id}", headers=alice["headers"])).status_code == 200
        listing = await client.get(f"{API}/tweets/user/{alice['id']}")
        assert listing.json()["data"] == []

    @pytest.mark.asyncio
    async def test_form_encoded_tweet(self, client):
        alice = await signup(client, "alice")

        created = await client.post(
            f"{API}/tweets", data={"content": "from a form"}, headers=alice["headers"]
        )

        assert created.status_code == 201
        assert created.json()["data"]["content"] == "from a form"


class TestDashboardAPI:
    @pytest.mark.asyncio
    async def test_empty_channel_reports_zeros(self, client):
        alice = await signup(client, "alice")

        response = await client.get(f"{API}/dashboard/stats", headers=alice["headers"])

        assert response.json()["data"] == {
            "totalVideos": 0,
            "totalViews": 0,
            "totalSubscribers": 0,
            "totalLikes": 0,
            "totalVideoLikes": 0,
            "totalComments": 0,
        }

    @pytest.mark.asyncio
    async def test_channel_videos_include_unpublished(self, client):
        alice = await signup(client, "alice")
        bob = await signup(client, "bob")
        video = await publish(client, alice)
        await client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob["headers"])
        await client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=alice["headers"])

        response = await client.get(f"{API}/dashboard/videos", headers=alice["headers"])

        rows = response.json()["data"]
        assert len(rows) == 1
        assert rows[0]["isPublished"] is False
        assert rows[0]["likesCount"] == 1
