"""
Init command implementation for statecraft project setup.

``statecraft init`` asks a few questions (or takes them as flags with
``--yes``) and then:
- writes an empty board with the canonical columns
- creates the task spec directory next to the board
- writes the chosen AI rule files (Cursor, Claude, Codex AGENTS.md)
- records the answers in .statecraft.json for ``statecraft sync``
"""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from statecraft.cli.errors import ExitCode, print_error
from statecraft.core.config import RuleOptions
from statecraft.core.constants import (
    INIT_DEFAULT_BOARD_PATH,
    INIT_DEFAULT_TASKS_DIR,
    INIT_INCLUDE_TASK_SPEC_FORMAT_DEFAULT,
    INIT_REQUIRE_SPEC_FILE_DEFAULT,
    INIT_STRICT_MODE_DEFAULT,
)
from statecraft.core.scaffold import InitOptions, ScaffoldError, run_init

console = Console()
logger = logging.getLogger(__name__)


def _ask_text(value: str | None, prompt: str, default: str, yes: bool) -> str:
    if value is not None:
        return value
    if yes:
        return default
    return str(typer.prompt(prompt, default=default)).strip() or default


def _ask_flag(value: bool | None, prompt: str, default: bool, yes: bool) -> bool:
    if value is not None:
        return value
    if yes:
        return default
    return typer.confirm(prompt, default=default)


def _collect_rule_options(
    strict: bool | None,
    require_spec: bool | None,
    spec_format: bool | None,
    yes: bool,
) -> RuleOptions:
    """Ask for rule options only when the user wants to customize them."""
    all_given = None not in (strict, require_spec, spec_format)
    customize = (
        not yes
        and not all_given
        and typer.confirm("Customize AI rule options?", default=False)
    )
    use_defaults = not customize

    return RuleOptions(
        strict_mode=_ask_flag(
            strict,
            "Always validate the board after editing it?",
            INIT_STRICT_MODE_DEFAULT,
            use_defaults,
        ),
        require_spec_file=_ask_flag(
            require_spec,
            "Require a spec file for every task?",
            INIT_REQUIRE_SPEC_FILE_DEFAULT,
            use_defaults,
        ),
        include_task_spec_format=_ask_flag(
            spec_format,
            "Include the task spec file format in rules?",
            INIT_INCLUDE_TASK_SPEC_FORMAT_DEFAULT,
            use_defaults,
        ),
    )


def main(
    name: str | None = typer.Option(
        None,
        "--name",
        "-n",
        help="Board name (default: current directory name)",
        show_default=False,
    ),
    board_path: str | None = typer.Option(
        None,
        "--board-path",
        help=f"Board file to create (default: {INIT_DEFAULT_BOARD_PATH})",
        show_default=False,
    ),
    tasks_dir: str | None = typer.Option(
        None,
        "--tasks-dir",
        help=f"Task spec directory, relative to the board (default: {INIT_DEFAULT_TASKS_DIR})",
        show_default=False,
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Tell assistants to validate after every board edit",
        show_default=False,
    ),
    require_spec: bool | None = typer.Option(
        None,
        "--require-spec/--no-require-spec",
        help="Tell assistants every task needs a spec file",
        show_default=False,
    ),
    spec_format: bool | None = typer.Option(
        None,
        "--spec-format/--no-spec-format",
        help="Include the task spec file format in the rules",
        show_default=False,
    ),
    cursor: bool | None = typer.Option(
        None,
        "--cursor/--no-cursor",
        help="Write .cursor/rules/statecraft.mdc",
        show_default=False,
    ),
    claude: bool | None = typer.Option(
        None,
        "--claude/--no-claude",
        help="Write .claude/rules/statecraft.md",
        show_default=False,
    ),
    codex: bool | None = typer.Option(
        None,
        "--codex/--no-codex",
        help="Add a Statecraft section to AGENTS.md",
        show_default=False,
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Accept defaults for anything not given as a flag",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing board file",
    ),
) -> None:
    """
    Create a board and AI assistant rules in the current directory.

    Without --yes, each missing answer is asked interactively. Rule files
    default to off, so pass --cursor, --claude or --codex with --yes.

    Examples:
        statecraft init
        statecraft init --yes --name "Payments" --cursor --claude
        statecraft init --yes --board-path docs/board.yaml --tasks-dir tasks
    """
    cwd = Path.cwd()

    board_name = _ask_text(name, "Board name", cwd.name or "My Board", yes)
    board_file = _ask_text(board_path, "Board file path", INIT_DEFAULT_BOARD_PATH, yes)
    spec_dir = _ask_text(
        tasks_dir,
        "Task spec directory (relative to the board file)",
        INIT_DEFAULT_TASKS_DIR,
        yes,
    )
    rule_options = _collect_rule_options(strict, require_spec, spec_format, yes)

    try:
        options = InitOptions(
            board_name=board_name,
            board_path=board_file,
            tasks_dir=spec_dir,
            rule_options=rule_options,
            cursor=_ask_flag(cursor, "Create a Cursor rule?", False, yes),
            claude=_ask_flag(claude, "Create a Claude Code rule?", False, yes),
            codex=_ask_flag(codex, "Add Statecraft to AGENTS.md for Codex?", False, yes),
            force=force,
        )
    except ValidationError as e:
        print_error("Invalid init options", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    try:
        result = run_init(options, cwd)
    except ScaffoldError as e:
        print_error(str(e), solution="statecraft init --force")
        raise typer.Exit(ExitCode.USER_ERROR)
    except OSError as e:
        print_error("Could not write project files", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    for created in result.created:
        console.print(f"[green]✓[/green] Created {escape(created)}", highlight=False)
    for updated in result.updated:
        console.print(f"[green]✓[/green] Updated {escape(updated)}", highlight=False)

    console.print(
        f"\n[dim]Next: add tasks to {escape(options.board_path)}, "
        f"then run 'statecraft validate {escape(options.board_path)}'[/dim]",
        highlight=False,
    )
