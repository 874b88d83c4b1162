"""
Tests for the render server API.

Tests validate:
- GET /api/board and /api/board/parsed
- Error responses for missing and malformed boards
- WebSocket initial message and change broadcasts
- Static page and SPA fallback
"""

import asyncio
import os
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from statecraft.core.render import BoardWatcher, ConnectionManager, create_app, watch_board


@pytest.fixture
def client(board_file):
    """Test client for a server watching the sample board."""
    with TestClient(create_app(board_file, poll_interval=0.01, debounce=0.01)) as test_client:
        yield test_client


class TestRootEndpoints:
    """Tests for health and static endpoints."""

    def test_health_endpoint(self, client):
        """Test GET /health returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root_serves_viewer(self, client):
        """Test GET / serves the viewer page."""
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "<!doctype html>" in response.text.lower()

    def test_spa_fallback(self, client):
        """Test unknown non-API paths serve the viewer page."""
        response = client.get("/some/client/route")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    def test_unknown_api_path_is_404(self, client):
        """Test unknown API paths are not swallowed by the fallback."""
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"


class TestBoardEndpoints:
    """Tests for the board endpoints."""

    def test_raw_board(self, client, board_file):
        """Test GET /api/board returns the file as YAML text."""
        response = client.get("/api/board")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/yaml")
        assert response.text == board_file.read_text()

    def test_parsed_board(self, client):
        """Test GET /api/board/parsed returns board, validation, summary and blocked."""
        data = client.get("/api/board/parsed").json()

        assert data["board"]["board"] == "Payments"
        assert data["board"]["columns"][2] == {"name": "In Progress", "limit": 2}
        assert data["validation"] == {"valid": True, "errors": [], "warnings": []}
        assert data["summary"].startswith("Board: Payments\n")
        assert data["blocked"] == {"billing-export": ["auth-session"]}

    def test_missing_board(self, tmp_path):
        """Test a missing board file is a 404 with the standard message."""
        app = create_app(tmp_path / "missing.yaml")
        with TestClient(app) as test_client:
            raw = test_client.get("/api/board")
            parsed = test_client.get("/api/board/parsed")

        assert raw.status_code == 404
        assert raw.json()["message"] == "Board file not found or unreadable."
        assert parsed.status_code == 404

    def test_malformed_board(self, tmp_path):
        """Test a board that does not parse is a 422 with the parse error."""
        path = tmp_path / "board.yaml"
        path.write_text("board: X\ncolumns: []\ntasks: {}\n")

        with TestClient(create_app(path)) as test_client:
            response = test_client.get("/api/board/parsed")

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "INVALID_BOARD"
        assert body["message"] == "columns must be a non-empty array"

    def test_invalid_board_still_parses(self, tmp_path):
        """Test validation errors are returned, not raised."""
        path = tmp_path / "board.yaml"
        path.write_text("board: X\ncolumns: [Todo]\ntasks: {}\n")

        with TestClient(create_app(path)) as test_client:
            data = test_client.get("/api/board/parsed").json()

        assert data["validation"]["valid"] is False
        assert data["validation"]["errors"][0]["code"] == "COLUMNS_NOT_CANONICAL"


class TestWatchWebSocket:
    """Tests for the watch WebSocket."""

    def test_sends_current_board_on_connect(self, client, board_file):
        """Test the first message is the current board text."""
        with client.websocket_connect("/api/board/watch") as websocket:
            assert websocket.receive_text() == board_file.read_text()

    def test_broadcasts_changes(self, client, board_file):
        """Test an edit to the file reaches connected clients."""
        with client.websocket_connect("/api/board/watch") as websocket:
            websocket.receive_text()
            mtime = board_file.stat().st_mtime + 1
            board_file.write_text("board: Changed\ncolumns: [Backlog]\ntasks: {}\n")
            os.utime(board_file, (mtime, mtime))

            assert websocket.receive_text() == "board: Changed\ncolumns: [Backlog]\ntasks: {}\n"


class TestConnectionManager:
    """Tests for broadcast fan-out."""

    async def test_broadcast_drops_failed_clients(self):
        """Test a client whose send fails is removed and others still receive."""
        manager = ConnectionManager()
        good = AsyncMock()
        bad = AsyncMock()
        bad.send_text.side_effect = RuntimeError("gone")
        manager.active_connections = [good, bad]

        await manager.broadcast("board: X\n")

        good.send_text.assert_awaited_once_with("board: X\n")
        assert manager.active_connections == [good]

    async def test_watch_board_debounces(self, tmp_path):
        """Test a burst of edits is broadcast once after it settles."""
        path = tmp_path / "board.yaml"
        path.write_text("board: A\n")
        watcher = BoardWatcher(path, poll_interval=0.01)
        manager = ConnectionManager()
        manager.broadcast = AsyncMock()

        task = asyncio.create_task(watch_board(watcher, manager, debounce=0.2))
        try:
            for i in range(3):
                path.write_text(f"board: B{i}\n")
                await asyncio.sleep(0.03)
            await asyncio.sleep(0.5)
        finally:
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        manager.broadcast.assert_awaited_once_with("board: B2\n")
