# tests/unit/test_media_client.py
"""
Unit Tests for MediaClient
The media host is replaced by an httpx.MockTransport
"""

import hashlib

import httpx
import pytest

from vidtube.app.config import MediaConfig
from vidtube.infrastructure.clients.media_client import MediaClient, sign_params, stage_upload


@pytest.fixture
def media_config(tmp_path):
    return MediaConfig(
        cloud_name="demo",
        api_key="key-123",
        api_secret="shh",
        folder="vidtube/tests",
        upload_dir=str(tmp_path / "staging"),
    )


@pytest.fixture
def staged_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"fake video")
    return path


def _client(config, handler):
    return MediaClient(config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestSignature:
    def test_sorted_params_with_secret(self):
        expected = hashlib.sha1(b"folder=f&timestamp=100shh").hexdigest()
        assert sign_params({"timestamp": 100, "folder": "f"}, "shh") == expected

    def test_empty_values_are_skipped(self):
        assert sign_params({"a": 1, "b": ""}, "s") == sign_params({"a": 1}, "s")


class TestUpload:
    @pytest.mark.asyncio
    async def test_successful_upload(self, media_config, staged_file):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.read()
            return httpx.Response(
                200,
                json={
                    "secure_url": "https://res.cloudinary.com/demo/video/upload/clip.mp4",
                    "url": "http://res.cloudinary.com/demo/video/upload/clip.mp4",
                    "public_id": "vidtube/tests/clip",
                    "resource_type": "video",
                    "duration": 42.5,
                },
            )

        client = _client(media_config, handler)
        asset = await client.upload(staged_file)

        assert asset is not None
        assert asset.url.startswith("https://")
        assert asset.public_id == "vidtube/tests/clip"
        assert asset.resource_type == "video"
        assert asset.duration == 42.5
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/auto/upload"
        assert b'name="signature"' in seen["body"]
        assert b"key-123" in seen["body"]
        assert b"shh" not in seen["body"]
        assert not staged_file.exists()

    @pytest.mark.asyncio
    async def test_rejected_upload_returns_none_and_removes_file(self, media_config, staged_file):
        client = _client(media_config, lambda request: httpx.Response(401, json={"error": "bad"}))

        assert await client.upload(staged_file) is None
        assert not staged_file.exists()

    @pytest.mark.asyncio
    async def test_network_error_returns_none(self, media_config, staged_file):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert await _client(media_config, handler).upload(staged_file) is None
        assert not staged_file.exists()

    @pytest.mark.asyncio
    async def test_unconfigured_client_does_not_call_host(self, staged_file):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        client = _client(MediaConfig(cloud_name="", api_key="", api_secret=""), handler)

        assert await client.upload(staged_file) is None
        assert calls == []
        assert not staged_file.exists()


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_uses_resource_type(self, media_config):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"result": "ok"})

        assert await _client(media_config, handler).delete("vidtube/tests/clip", "video")
        assert seen["url"].endswith("/demo/video/destroy")

    @pytest.mark.asyncio
    async def test_delete_not_found(self, media_config):
        client = _client(media_config, lambda request: httpx.Response(200, json={"result": "not found"}))
        assert await client.delete("missing") is False

    @pytest.mark.asyncio
    async def test_blank_public_id(self, media_config):
        client = _client(media_config, lambda request: httpx.Response(500))
        assert await client.delete("") is False


class TestStaging:
    @pytest.mark.asyncio
    async def test_stage_upload_strips_directories(self, media_config, tmp_path):
        source = tmp_path / "incoming.bin"
        source.write_bytes(b"payload")

        with open(source, "rb") as fh:
            path = await stage_upload(fh, "../../etc/avatar.png", media_config.upload_dir)

        assert path.parent == tmp_path / "staging"
        assert path.name.endswith("-avatar.png")
        assert path.read_bytes() == b"payload"
