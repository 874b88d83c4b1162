"""
Statecraft CLI - Sync command.

Regenerate AI rule files after upgrading statecraft or editing
.statecraft.json.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from statecraft.cli.errors import ExitCode, print_error
from statecraft.core.config import ConfigError
from statecraft.core.sync import SyncError, run_sync

console = Console()
logger = logging.getLogger(__name__)


def main(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show which files would be updated without writing them",
    ),
) -> None:
    """
    Regenerate AI rule files from .statecraft.json.

    Projects set up before .statecraft.json existed are recovered from their
    rule files, and the config is written so later syncs use it.

    Examples:
        statecraft sync
        statecraft sync --dry-run
    """
    try:
        result = run_sync(Path.cwd(), dry_run=dry_run)
    except ConfigError as e:
        print_error(str(e), reason=e.detail, solution="statecraft init --force")
        raise typer.Exit(ExitCode.USER_ERROR)
    except SyncError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except OSError as e:
        print_error("Could not write rule files", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    for message in result.messages:
        console.print(escape(message), highlight=False)
