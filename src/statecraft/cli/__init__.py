"""
Statecraft CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys
import threading

import typer
from rich.console import Console

from statecraft import __version__
from statecraft.cli import init_cmd, render, spec, summarize, sync, validate
from statecraft.cli.errors import ExitCode
from statecraft.core.config import load_layered_env
from statecraft.core.update_check import run_update_check

# Help panel names for command grouping
PANEL_BOARD = "Work with a Board"
PANEL_PROJECT = "Set Up a Project"
PANEL_INSTALL = "About Statecraft"

# Seconds to wait for the update check before exiting
UPDATE_CHECK_JOIN_SECONDS = 1.0

app = typer.Typer(
    name="statecraft",
    help="Validate, summarize, and render Statecraft board files",
    no_args_is_help=False,
    invoke_without_command=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _finish_update_check(thread: threading.Thread | None) -> None:
    if thread is not None:
        thread.join(UPDATE_CHECK_JOIN_SECONDS)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Statecraft - YAML task boards for humans and AI assistants.

    A board is one YAML file with four columns (Backlog, Ready, In Progress,
    Done) and a map of tasks. Statecraft checks it, summarizes it, serves it
    in the browser and keeps AI assistant rules pointing at it.

    Quick Start:
        1. statecraft init           # Create board.yaml and rules
        2. statecraft validate       # Check the board
        3. statecraft render --open  # Watch it in the browser

    Documentation:
        statecraft spec              # Board file format
        statecraft <command> --help  # Help for a specific command
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    ctx.obj = {"debug": debug}

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_usage(), err=True)
        typer.echo("Try 'statecraft --help' for help.", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    thread = run_update_check(__version__)
    ctx.call_on_close(lambda: _finish_update_check(thread))


# =============================================================================
# Work with a Board
# =============================================================================

app.command(name="validate", rich_help_panel=PANEL_BOARD)(validate.main)
app.command(name="summarize", rich_help_panel=PANEL_BOARD)(summarize.main)
app.command(name="render", rich_help_panel=PANEL_BOARD)(render.main)
app.command(name="spec", rich_help_panel=PANEL_BOARD)(spec.spec)


# =============================================================================
# Set Up a Project
# =============================================================================

app.command(name="init", rich_help_panel=PANEL_PROJECT)(init_cmd.main)
app.command(name="sync", rich_help_panel=PANEL_PROJECT)(sync.main)


# =============================================================================
# About Statecraft
# =============================================================================


@app.command(rich_help_panel=PANEL_INSTALL)
def version() -> None:
    """Show statecraft version and exit."""
    console.print(f"statecraft version {__version__}", highlight=False)
    raise typer.Exit(ExitCode.SUCCESS)


def cli_main() -> None:
    """
    Main CLI entry point.

    ``statecraft --version`` is accepted as an alias for ``statecraft version``.
    """
    if sys.argv[1:] in (["--version"], ["-V"]):
        sys.argv[1:] = ["version"]
    app()


__all__ = ["app", "cli_main"]
