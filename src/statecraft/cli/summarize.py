"""
Statecraft CLI - Summarize command.

Print a short text summary of the board.
"""

from pathlib import Path

import typer

from statecraft.cli.errors import ExitCode, print_plain_error, reject_extra_paths
from statecraft.core.board import ParseError, parse_board, summarize
from statecraft.core.config import resolve_board_path


def main(
    path: str | None = typer.Argument(
        None,
        help="Board file (default: STATECRAFT_BOARD, .statecraft.json, or ./board.yaml)",
        show_default=False,
    ),
    extra: list[str] | None = typer.Argument(None, hidden=True),
) -> None:
    """
    Print a short text summary of the board.

    Lists columns with task counts, WIP limits that are reached, every task
    in column order and the tasks still waiting on dependencies.

    Examples:
        statecraft summarize
        statecraft summarize docs/board.yaml
    """
    reject_extra_paths(extra)
    board_path = resolve_board_path(path)

    try:
        board = parse_board(Path(board_path))
    except ParseError as e:
        print_plain_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    # Written verbatim; task lines contain "[status]" which rich would eat as markup
    typer.echo(summarize(board), nl=False)
