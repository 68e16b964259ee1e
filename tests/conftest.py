"""
Songs API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── fake_store: In-memory SongStore with switchable failures
    ├── sample_song: The five-field POST body used across tests
    └── test_client: HTTPX AsyncClient wired to an app using fake_store
"""

import os
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
# Why: Prevents tests from picking up real AWS credentials
os.environ["AWS_TABLE_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "test-key-not-real"
os.environ["AWS_SECRET_ACCESS_KEY"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from songs_api.services.song_store import SongStore, TypedItem, song_to_item  # noqa: E402


class FakeSongStore(SongStore):
    """
    In-memory SongStore recording every call.

    Attributes tests may flip:
        ack_status:  status returned by put_song (DynamoDB returns 200)
        put_error:   exception raised by put_song instead of storing
        get_error:   exception raised by get_song instead of reading
        healthy:     value returned by health_check
    """

    def __init__(self):
        self.items: Dict[str, TypedItem] = {}
        self.put_calls: List[Dict[str, Any]] = []
        self.get_calls: List[str] = []
        self.ack_status = 200
        self.put_error: Optional[Exception] = None
        self.get_error: Optional[Exception] = None
        self.healthy = True

    async def put_song(self, song: Dict[str, Any]) -> int:
        self.put_calls.append(song)
        if self.put_error is not None:
            raise self.put_error
        if self.ack_status == 200:
            self.items[str(song["title"])] = song_to_item(song)
        return self.ack_status

    async def get_song(self, title: str) -> Optional[TypedItem]:
        self.get_calls.append(title)
        if self.get_error is not None:
            raise self.get_error
        return self.items.get(title)

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def fake_store():
    """A fresh, empty in-memory store for each test."""
    return FakeSongStore()


@pytest.fixture
def sample_song():
    """The POST body from the reference scenario."""
    return {
        "title": "A",
        "artist": "B",
        "album": "C",
        "released": 1999,
        "genres": "rock",
    }


@pytest_asyncio.fixture
async def test_client(fake_store):
    """
    Provides an async HTTP test client for endpoint testing.

    How:  create_app() receives the fake store directly, so no DynamoDB
          client is ever built (ASGITransport does not run the lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from songs_api.main import create_app

    app = create_app(song_store=fake_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
