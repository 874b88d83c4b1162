"""
Statecraft CLI - Render command.

Serve the board in the browser as a read-only page that refreshes whenever
the file changes.
"""

import logging
import threading
import time
import webbrowser
from pathlib import Path

import typer
from rich.console import Console

from statecraft.cli.errors import ExitCode, print_error
from statecraft.core.config import resolve_board_path, resolve_port

console = Console()
logger = logging.getLogger(__name__)

BROWSER_OPEN_DELAY_SECONDS = 1.0


def _open_browser_later(url: str) -> None:
    def open_browser() -> None:
        time.sleep(BROWSER_OPEN_DELAY_SECONDS)  # Give uvicorn time to bind
        webbrowser.open(url)

    threading.Thread(target=open_browser, daemon=True).start()


def main(
    ctx: typer.Context,
    path: str | None = typer.Argument(
        None,
        help="Board file (default: STATECRAFT_BOARD, .statecraft.json, or ./board.yaml)",
        show_default=False,
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port for the server (default: STATECRAFT_PORT or 3000)",
        show_default=False,
    ),
    open_browser: bool = typer.Option(
        False,
        "--open",
        help="Open the browser after starting the server",
    ),
) -> None:
    """
    Serve the board in the browser (read-only UI).

    The page reloads the board every time the file is saved.

    Examples:
        statecraft render
        statecraft render docs/board.yaml --port 8080
        statecraft render --open
    """
    debug = ctx.obj.get("debug", False) if ctx.obj else False

    board_path = Path(resolve_board_path(path))
    server_port = resolve_port(port)
    if not board_path.is_file():
        # The server still starts and picks the file up once it appears
        logger.warning("Board file %s does not exist yet", board_path)

    import uvicorn

    from statecraft.core.render import create_app

    url = f"http://localhost:{server_port}"
    typer.echo(f"Open {url}")
    if open_browser:
        _open_browser_later(url)

    try:
        uvicorn.run(
            create_app(board_path),
            host="127.0.0.1",
            port=server_port,
            log_level="info" if debug else "warning",
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Render server stopped[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)
    except OSError as e:
        print_error(
            f"Could not start the render server on port {server_port}",
            reason=str(e),
            solution=f"statecraft render --port {server_port + 1}",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR)
