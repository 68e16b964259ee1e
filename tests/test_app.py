"""
Songs API — Application Factory, Lifespan and Health Tests
============================================================

What:  Tests for store wiring in create_app()/lifespan, request-ID log
       stamping and GET /health.
How:   The lifespan is driven directly; connect_dynamodb is patched out.
"""

import io
import logging
from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest

from songs_api.main import create_app, lifespan, setup_logging
from songs_api.middleware.request_id import RequestIDLogFilter, request_id_var
from songs_api.services.song_store import UnavailableSongStore


class TestLifespan:

    @pytest.mark.asyncio
    async def test_injected_store_is_kept(self, fake_store):
        app = create_app(song_store=fake_store)

        with patch("songs_api.main.connect_dynamodb") as mock_connect:
            async with lifespan(app):
                assert app.state.song_store is fake_store

        mock_connect.assert_not_called()

    @pytest.mark.asyncio
    async def test_dynamodb_store_built_and_closed(self, fake_store):
        events = []

        @asynccontextmanager
        async def fake_connect(config):
            events.append("open")
            yield fake_store
            events.append("close")

        app = create_app()
        with patch("songs_api.main.connect_dynamodb", fake_connect):
            async with lifespan(app):
                assert app.state.song_store is fake_store
                assert events == ["open"]

        assert events == ["open", "close"]

    @pytest.mark.asyncio
    async def test_client_construction_failure_falls_back(self):
        @asynccontextmanager
        async def failing_connect(config):
            raise RuntimeError("You must specify a region.")
            yield  # pragma: no cover

        app = create_app()
        with patch("songs_api.main.connect_dynamodb", failing_connect):
            async with lifespan(app):
                store = app.state.song_store
                assert isinstance(store, UnavailableSongStore)
                assert "region" in store.reason


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == "reachable"

    @pytest.mark.asyncio
    async def test_unhealthy_store(self, test_client, fake_store):
        fake_store.healthy = False
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"
        assert response.json()["store"] == "unreachable"


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg: str = "Stored song 'A'") -> logging.LogRecord:
    return logging.LogRecord("songs_api.services.song_service", logging.INFO, __file__, 1, msg, None, None)


class TestRequestIDLogging:

    def test_filter_stamps_current_request_id(self):
        token = request_id_var.set("abc123")
        try:
            record = make_record()
            assert RequestIDLogFilter().filter(record) is True
        finally:
            request_id_var.reset(token)

        assert record.request_id == "abc123"

    def test_filter_outside_request(self):
        record = make_record()
        RequestIDLogFilter().filter(record)
        assert record.request_id == "-"

    def test_setup_logging_prints_request_id(self, restore_root_logging):
        setup_logging()
        handler = restore_root_logging.handlers[0]
        assert any(isinstance(f, RequestIDLogFilter) for f in handler.filters)

        stream = io.StringIO()
        handler.setStream(stream)
        token = request_id_var.set("abc123")
        try:
            logging.getLogger("songs_api.services.song_service").warning("Stored song %r", "A")
        finally:
            request_id_var.reset(token)

        assert "[abc123] songs_api.services.song_service: Stored song 'A'" in stream.getvalue()

    @pytest.mark.asyncio
    async def test_request_id_reaches_song_logs(self, test_client, restore_root_logging):
        setup_logging()
        stream = io.StringIO()
        restore_root_logging.handlers[0].setStream(stream)

        await test_client.get("/songs", params={"title": "Z"}, headers={"X-Request-ID": "rid42"})

        # LOG_LEVEL is WARNING under test, so the 404 access line is the one emitted
        assert "[rid42] songs_api.access: GET /songs 404" in stream.getvalue()
