# tests/api/test_errors_api.py
"""
API Tests for the error envelope, request limits and system endpoints
"""

import json

import httpx
import pytest

from conftest import API, signup
from vidtube.app.main import create_app


class TestErrorEnvelope:
    @pytest.mark.asyncio
    async def test_service_error_includes_stack_outside_production(self, client):
        response = await client.get(f"{API}/users/current-user")

        body = response.json()
        assert body["statusCode"] == 401
        assert body["success"] is False
        assert body["errors"] == []
        assert "stack" in body

    @pytest.mark.asyncio
    async def test_production_hides_stack(self, make_config, db_manager, media):
        app = create_app(
            config=make_config(APP_ENV="production"), db_manager=db_manager, media_client=media
        )
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="https://test") as client:
            response = await client.get(f"{API}/users/current-user")

        assert response.status_code == 401
        assert "stack" not in response.json()

    @pytest.mark.asyncio
    async def test_request_validation_is_bad_request(self, client):
        response = await client.post(f"{API}/users/login", json={"username": "alice"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get(f"{API}/nothing-here")

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestBodyLimit:
    @pytest.mark.asyncio
    async def test_oversized_json_rejected(self, client):
        alice = await signup(client, "alice")

        response = await client.post(
            f"{API}/tweets", json={"content": "x" * 20_000}, headers=alice["headers"]
        )

        assert response.status_code == 413
        assert response.json()["statusCode"] == 413

    @pytest.mark.asyncio
    async def test_streamed_json_without_length_rejected(self, client):
        alice = await signup(client, "alice")
        body = json.dumps({"content": "x" * 40_000}).encode()

        async def chunks():
            for start in range(0, len(body), 4_096):
                yield body[start : start + 4_096]

        response = await client.post(
            f"{API}/tweets",
            content=chunks(),
            headers={**alice["headers"], "Content-Type": "application/json"},
        )

        assert response.status_code == 413
        assert response.json()["statusCode"] == 413
        listing = await client.get(f"{API}/tweets/user/{alice['id']}")
        assert listing.json()["data"] == []

    @pytest.mark.asyncio
    async def test_small_json_accepted(self, client):
        alice = await signup(client, "alice")

        response = await client.post(
            f"{API}/tweets", json={"content": "x" * 1_000}, headers=alice["headers"]
        )

        assert response.status_code == 201


class TestSystemEndpoints:
    @pytest.mark.asyncio
    async def test_healthcheck(self, client):
        response = await client.get(f"{API}/healthcheck")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"status": "OK", "database": True}

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.json()["health"] == f"{API}/healthcheck"
