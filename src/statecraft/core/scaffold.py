"""
Project scaffolding for ``statecraft init``.

Creates a canonical empty board, the task spec directory, the selected AI
rule files and .statecraft.json so later ``statecraft sync`` runs can
regenerate the rules.
"""

import logging
import posixpath
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from statecraft.core.board.models import CANONICAL_COLUMNS
from statecraft.core.config.loader import save_config
from statecraft.core.config.models import RuleOptions, StatecraftConfig
from statecraft.core.constants import (
    CONFIG_FILENAME,
    INIT_DEFAULT_BOARD_PATH,
    INIT_DEFAULT_TASKS_DIR,
)
from statecraft.core.rules import (
    AGENTS_PATH,
    CLAUDE_RULE_PATH,
    CURSOR_RULE_PATH,
    UpsertAction,
    build_claude_rule_content,
    build_codex_agents_content,
    build_cursor_rule_content,
    upsert_codex_section,
)

logger = logging.getLogger(__name__)


class ScaffoldError(Exception):
    """Raised when init cannot proceed without clobbering user files."""


class InitOptions(BaseModel):
    """Answers collected by ``statecraft init``."""

    board_name: str = Field(..., min_length=1, description="Value of the board key")
    board_path: str = Field(default=INIT_DEFAULT_BOARD_PATH, min_length=1)
    tasks_dir: str = Field(
        default=INIT_DEFAULT_TASKS_DIR,
        min_length=1,
        description="Task spec directory, relative to the board file",
    )
    rule_options: RuleOptions = Field(default_factory=RuleOptions)
    cursor: bool = False
    claude: bool = False
    codex: bool = False
    force: bool = Field(default=False, description="Overwrite an existing board file")


class InitResult(BaseModel):
    """Files touched by init, relative to the project directory."""

    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)


def build_board_yaml(name: str) -> str:
    """YAML for an empty board with the canonical columns."""
    document = {"board": name, "columns": list(CANONICAL_COLUMNS), "tasks": {}}
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)


def spec_dir_for(board_path: str, tasks_dir: str) -> str:
    """
    Task spec directory as seen from the project root.

    Example:
        >>> spec_dir_for("docs/board.yaml", "tasks")
        'docs/tasks'
    """
    return posixpath.normpath(posixpath.join(posixpath.dirname(board_path), tasks_dir))


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def run_init(options: InitOptions, cwd: Path | None = None) -> InitResult:
    """
    Scaffold a statecraft project.

    Args:
        options: Init answers
        cwd: Project directory (defaults to current directory)

    Returns:
        InitResult listing created and updated files

    Raises:
        ScaffoldError: If the board file exists and ``force`` is not set
    """
    if cwd is None:
        cwd = Path.cwd()
    result = InitResult()

    board_file = cwd / options.board_path
    if board_file.exists() and not options.force:
        raise ScaffoldError(f"Board file already exists: {options.board_path}")

    _write(board_file, build_board_yaml(options.board_name))
    result.created.append(options.board_path)

    spec_dir = spec_dir_for(options.board_path, options.tasks_dir)
    (cwd / spec_dir).mkdir(parents=True, exist_ok=True)

    rule_options = options.rule_options
    if options.cursor:
        content = build_cursor_rule_content(options.board_path, spec_dir, rule_options)
        _write(cwd / CURSOR_RULE_PATH, content)
        result.created.append(CURSOR_RULE_PATH.as_posix())

    if options.claude:
        content = build_claude_rule_content(options.board_path, spec_dir, rule_options)
        _write(cwd / CLAUDE_RULE_PATH, content)
        result.created.append(CLAUDE_RULE_PATH.as_posix())

    if options.codex:
        section = build_codex_agents_content(options.board_path, spec_dir, rule_options)
        action = upsert_codex_section(cwd / AGENTS_PATH, section)
        target = result.created if action == UpsertAction.CREATED else result.updated
        target.append(AGENTS_PATH.as_posix())

    config = StatecraftConfig(
        board_path=options.board_path,
        tasks_dir=options.tasks_dir,
        strict_mode=rule_options.strict_mode,
        require_spec_file=rule_options.require_spec_file,
        include_task_spec_format=rule_options.include_task_spec_format,
        cursor=options.cursor,
        claude=options.claude,
        codex=options.codex,
    )
    config_existed = (cwd / CONFIG_FILENAME).exists()
    save_config(config, cwd)
    (result.updated if config_existed else result.created).append(CONFIG_FILENAME)

    logger.debug("Initialized statecraft project in %s", cwd)
    return result
