"""
FastAPI application for ``statecraft render``.

Serves one board file read-only:
- GET /api/board          - raw board YAML
- GET /api/board/parsed   - parsed board, validation result, summary, blocked map
- WS  /api/board/watch    - current YAML on connect, new YAML on every change
- GET /health             - health check
- everything else         - the static viewer page (SPA fallback)

Usage:
    from statecraft.core.render.app import create_app
    uvicorn.run(create_app(Path("board.yaml")), port=3000)
"""

import asyncio
import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from enum import Enum
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect, status
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from statecraft import __version__
from statecraft.core.board import (
    BoardGraph,
    ParseError,
    parse_board_from_string,
    summarize,
    validate,
)
from statecraft.core.constants import RENDER_WATCH_DEBOUNCE_SECONDS, RENDER_WATCH_POLL_SECONDS

from .watcher import BoardWatcher

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
BOARD_NOT_FOUND = "Board file not found or unreadable."
HTTP_422 = 422


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_BOARD = "INVALID_BOARD"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ConnectionManager:
    """Tracks open WebSocket clients and fans board text out to them."""

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: str) -> None:
        """Send to every client; clients whose send fails are dropped."""
        disconnected = []
        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
            except Exception as e:
                logger.debug("Dropping WebSocket client: %s", e)
                disconnected.append(connection)

        for connection in disconnected:
            self.disconnect(connection)


async def watch_board(
    watcher: BoardWatcher,
    manager: ConnectionManager,
    debounce: float = RENDER_WATCH_DEBOUNCE_SECONDS,
) -> None:
    """
    Poll the board forever and broadcast its text after changes settle.

    Every change pushes the broadcast back by ``debounce`` seconds so a burst
    of writes produces one message. Unreadable boards broadcast "".
    """
    loop = asyncio.get_running_loop()
    due: float | None = None

    def on_change(_content: str | None) -> None:
        nonlocal due
        due = loop.time() + debounce

    watcher.on_change = on_change
    tick = min(watcher.poll_interval, debounce) if debounce > 0 else watcher.poll_interval

    while True:
        watcher.poll()
        if due is not None and loop.time() >= due:
            due = None
            await manager.broadcast(watcher.read() or "")
        await asyncio.sleep(tick)


def _read_board(board_path: Path) -> str | None:
    try:
        return board_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def create_app(
    board_path: Path,
    *,
    poll_interval: float = RENDER_WATCH_POLL_SECONDS,
    debounce: float = RENDER_WATCH_DEBOUNCE_SECONDS,
) -> FastAPI:
    """
    Build the render server for one board file.

    Args:
        board_path: Board file to serve and watch
        poll_interval: Seconds between file polls
        debounce: Seconds to wait after a change before broadcasting

    Returns:
        Configured FastAPI app
    """
    board_path = Path(board_path).resolve()
    manager = ConnectionManager()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        watcher = BoardWatcher(board_path, poll_interval=poll_interval)
        task = asyncio.create_task(watch_board(watcher, manager, debounce))
        logger.info("Watching %s", board_path)
        try:
            yield
        finally:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    app = FastAPI(
        title="Statecraft Board",
        description="Read-only view of a statecraft board file",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.board_path = board_path
    app.state.manager = manager

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/api/board")
    async def get_board() -> PlainTextResponse:
        """Raw board file content."""
        content = _read_board(board_path)
        if content is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOARD_NOT_FOUND)
        return PlainTextResponse(content, media_type="text/yaml")

    @app.get("/api/board/parsed")
    async def get_parsed_board() -> dict[str, Any]:
        """
        Parsed board with validation, summary and blocked tasks.

        Raises:
            HTTPException: 404 if the file cannot be read, 422 if it cannot be parsed
        """
        content = _read_board(board_path)
        if content is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOARD_NOT_FOUND)
        try:
            board = parse_board_from_string(content)
        except ParseError as e:
            raise HTTPException(status_code=HTTP_422, detail=str(e))

        result = validate(board, base_dir=board_path.parent)
        return {
            "board": board.to_dict(),
            "validation": result.model_dump(mode="json"),
            "summary": summarize(board),
            "blocked": BoardGraph(board).blocked(),
        }

    @app.websocket("/api/board/watch")
    async def watch(websocket: WebSocket) -> None:
        """Send the current board, then every change, until the client leaves."""
        await manager.connect(websocket)
        try:
            content = _read_board(board_path)
            if content is not None:
                await websocket.send_text(content)
            while True:
                # Clients never need to talk; this just waits for disconnect
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            manager.disconnect(websocket)

    @app.get("/")
    async def index() -> FileResponse:
        """Serve the viewer page."""
        return FileResponse(STATIC_DIR / "index.html")

    @app.get("/{full_path:path}")
    async def spa_fallback(full_path: str) -> FileResponse:
        """Serve static assets, or the viewer page for client-side routes."""
        if full_path.startswith("api/"):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
        candidate = (STATIC_DIR / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(STATIC_DIR.resolve()):
            return FileResponse(candidate)
        return FileResponse(STATIC_DIR / "index.html")

    _register_exception_handlers(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Convert HTTP errors to the standard error response format."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            error_code = ErrorCode.NOT_FOUND
        elif exc.status_code == HTTP_422:
            error_code = ErrorCode.INVALID_BOARD
        elif exc.status_code < 500:
            error_code = ErrorCode.INVALID_REQUEST
        else:
            error_code = ErrorCode.INTERNAL_ERROR

        logger.info(
            "HTTP %d on %s %s: %s",
            exc.status_code,
            request.method,
            request.url.path,
            exc.detail,
        )

        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error_code": error_code, "message": detail, "detail": detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log unexpected failures and return a clean 500."""
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            exc,
            traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error_code": ErrorCode.INTERNAL_ERROR,
                "message": "An internal server error occurred",
                "detail": str(exc),
            },
        )
