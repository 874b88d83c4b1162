"""
Standardized error handling and exit codes for the statecraft CLI.

Errors meant for people go through rich on stderr. Output meant for other
tools (validation lines, parse failures) is written verbatim so it can be
grepped and piped.
"""

from enum import IntEnum

import typer
from rich.console import Console
from rich.markup import escape

err_console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for statecraft CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Invalid board, unreadable file or other failure."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Board file already exists: board.yaml",
        ...     solution="statecraft init --force",
        ... )
    """
    err_console.print(f"[red]Error:[/red] {escape(problem)}", highlight=False)

    if reason:
        err_console.print(f"[dim]{escape(reason)}[/dim]", highlight=False)

    if solution:
        err_console.print(f"[cyan]→ Try:[/cyan] {solution}", highlight=False)


def print_plain_error(message: str) -> None:
    """Write a message to stderr with no styling."""
    typer.echo(message, err=True)


def reject_extra_paths(extra: list[str] | None) -> None:
    """
    Fail when a command got more than one board path.

    Raises:
        typer.Exit: With GENERAL_ERROR if extra paths were given
    """
    if extra:
        print_plain_error("Only one board file per run. Multiple paths are not supported.")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

