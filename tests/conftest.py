# tests/conftest.py
"""
Shared test fixtures
In-memory database, fake media host and an ASGI client bound to the app
"""

from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import httpx
import pytest
import pytest_asyncio

from vidtube.app.config import Config
from vidtube.app.database import DatabaseManager
from vidtube.app.main import create_app
from vidtube.infrastructure.clients.media_client import MediaAsset

pytest_plugins = ("pytest_asyncio",)

ACCESS_SECRET = "test-access-secret-0123456789abcdef0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef0123456789abcdef"


# ============================================================================
# Configuration
# ============================================================================


@pytest.fixture
def make_config(monkeypatch, tmp_path):
    """Factory building an isolated Config from environment overrides"""

    def _make(**overrides: str) -> Config:
        env = {
            "APP_ENV": "test",
            "DB_URL": "sqlite+aiosqlite:///:memory:",
            "AUTH_ACCESS_TOKEN_SECRET": ACCESS_SECRET,
            "AUTH_REFRESH_TOKEN_SECRET": REFRESH_SECRET,
            "AUTH_ACCESS_TOKEN_EXPIRY": "15m",
            "AUTH_REFRESH_TOKEN_EXPIRY": "10d",
            "MEDIA_CLOUD_NAME": "demo",
            "MEDIA_API_KEY": "key",
            "MEDIA_API_SECRET": "secret",
            "MEDIA_UPLOAD_DIR": str(tmp_path / "uploads"),
            "LOG_FILE_PATH": "",
        }
        env.update(overrides)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return Config(config_path=str(tmp_path / "missing.yaml"))

    return _make


@pytest.fixture
def config(make_config) -> Config:
    return make_config()


# ============================================================================
# Database
# ============================================================================


@pytest_asyncio.fixture
async def db_manager(config):
    """In-memory database with all tables created"""
    manager = DatabaseManager(config.database)
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def db_session(db_manager):
    async with db_manager.session() as session:
        yield session


# ============================================================================
# Media Host
# ============================================================================


class FakeMediaClient:
    """
    In-memory stand-in for the media host

    Files whose name contains one of ``fail_markers`` are rejected.
    """

    def __init__(self):
        self.uploaded: List[MediaAsset] = []
        self.deleted: List[Tuple[str, str]] = []
        self.fail_markers: Set[str] = set()

    async def upload(self, local_path: Path) -> Optional[MediaAsset]:
        path = Path(local_path)
        try:
            if any(marker in path.name for marker in self.fail_markers):
                return None
            is_video = path.suffix == ".mp4"
            public_id = f"vidtube/{path.stem}"
            asset = MediaAsset(
                url=f"https://media.test/{public_id}{path.suffix}",
                public_id=public_id,
                resource_type="video" if is_video else "image",
                duration=12.6 if is_video else None,
            )
            self.uploaded.append(asset)
            return asset
        finally:
            path.unlink(missing_ok=True)

    async def delete(self, public_id: str, resource_type: str = "image") -> bool:
        self.deleted.append((public_id, resource_type))
        return True


@pytest.fixture
def media() -> FakeMediaClient:
    return FakeMediaClient()


# ============================================================================
# Application
# ============================================================================


@pytest.fixture
def app(config, db_manager, media):
    return create_app(config=config, db_manager=db_manager, media_client=media)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="https://test") as c:
        yield c


# ============================================================================
# API Helpers
# ============================================================================

API = "/api/v1"

PNG = ("avatar.png", b"\x89PNG fake image bytes", "image/png")


async def register(client: httpx.AsyncClient, username: str, **fields) -> Dict:
    data = {
        "fullname": fields.pop("fullname", username.title()),
        "email": fields.pop("email", f"{username}@example.com"),
        "username": username,
        "password": fields.pop("password", "s3cret-pass"),
    }
    files = {"avatar": PNG}
    if fields.pop("cover", False):
        files["coverImage"] = ("cover.png", b"cover bytes", "image/png")
    response = await client.post(f"{API}/users/register", data=data, files=files)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def login(client: httpx.AsyncClient, username: str, password: str = "s3cret-pass") -> Dict:
    """
    Log in and return tokens

    Cookies are cleared so each test chooses its credentials explicitly
    through headers.
    """
    response = await client.post(
        f"{API}/users/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    client.cookies.clear()
    data = response.json()["data"]
    return {
        "id": data["user"]["id"],
        "access": data["accessToken"],
        "refresh": data["refreshToken"],
        "headers": {"Authorization": f"Bearer {data['accessToken']}"},
    }


async def signup(client: httpx.AsyncClient, username: str) -> Dict:
    await register(client, username)
    return await login(client, username)


async def publish(client: httpx.AsyncClient, user: Dict, title: str = "t", description: str = "d") -> Dict:
    response = await client.post(
        f"{API}/videos",
        data={"title": title, "description": description},
        files={
            "videoFile": ("clip.mp4", b"fake mp4 bytes", "video/mp4"),
            "thumbnail": ("thumb.png", b"thumb bytes", "image/png"),
        },
        headers=user["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
