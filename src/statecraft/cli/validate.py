"""
Statecraft CLI - Validate command.

Check a board file against the format and validation rules.
"""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from statecraft.cli.errors import ExitCode, print_plain_error, reject_extra_paths
from statecraft.core.board import ParseError, parse_board, validate
from statecraft.core.config import resolve_board_path

console = Console()
logger = logging.getLogger(__name__)


def main(
    path: str | None = typer.Argument(
        None,
        help="Board file (default: STATECRAFT_BOARD, .statecraft.json, or ./board.yaml)",
        show_default=False,
    ),
    extra: list[str] | None = typer.Argument(None, hidden=True),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the validation result as JSON",
    ),
) -> None:
    """
    Validate a board file (exit 0 if valid, 1 on errors).

    Every problem is reported in one run, one per line on stderr, as
    "<path>: <message>". Warnings (dependency cycles, missing spec files) are
    shown but do not fail validation.

    Examples:
        statecraft validate
        statecraft validate docs/board.yaml
        statecraft validate --json
    """
    reject_extra_paths(extra)
    board_path = resolve_board_path(path)
    logger.debug("Validating %s", board_path)

    try:
        board = parse_board(Path(board_path))
    except ParseError as e:
        if as_json:
            payload = {"valid": False, "errors": [{"message": str(e)}], "warnings": []}
            typer.echo(json.dumps(payload, indent=2))
        else:
            print_plain_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    result = validate(board, base_dir=Path(board_path).parent)

    if as_json:
        typer.echo(result.model_dump_json(indent=2, exclude_none=True))
        raise typer.Exit(ExitCode.SUCCESS if result.valid else ExitCode.GENERAL_ERROR)

    for warning in result.warnings:
        print_plain_error(f"warning: {warning.format()}")

    if not result.valid:
        for error in result.errors:
            print_plain_error(error.format())
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(
        f"[green]✓[/green] {escape(board_path)} is valid "
        f"({len(board.columns)} columns, {len(board.tasks)} tasks)",
        highlight=False,
    )
