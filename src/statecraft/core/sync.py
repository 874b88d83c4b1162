"""
Regenerate AI rule files from project configuration.

``statecraft sync`` rewrites every enabled rule file so it matches the
current rule text. Settings come from .statecraft.json; for projects
initialized before that file existed they are recovered from the rule
files themselves and the config is written for next time.
"""

import logging
import posixpath
from pathlib import Path

from pydantic import BaseModel, Field

from statecraft.core.config.loader import load_config, save_config
from statecraft.core.config.models import RuleOptions, StatecraftConfig
from statecraft.core.rules import (
    AGENTS_PATH,
    CLAUDE_RULE_PATH,
    CURSOR_RULE_PATH,
    build_claude_rule_content,
    build_codex_agents_content,
    build_cursor_rule_content,
    has_codex_section,
    parse_rule_locations,
    upsert_codex_section,
)
from statecraft.core.scaffold import spec_dir_for

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Raised when there is nothing to sync or settings cannot be recovered."""


class SyncResult(BaseModel):
    """Outcome of a sync run. ``messages`` are user-facing progress lines."""

    dry_run: bool = False
    updated: list[str] = Field(default_factory=list)
    wrote_config: bool = False
    messages: list[str] = Field(default_factory=list)


def _recover_config(cwd: Path) -> StatecraftConfig:
    """Rebuild settings from existing rule files (Cursor, then Claude, then AGENTS.md)."""
    cursor_path = cwd / CURSOR_RULE_PATH
    claude_path = cwd / CLAUDE_RULE_PATH
    agents_path = cwd / AGENTS_PATH

    has_cursor = cursor_path.is_file()
    has_claude = claude_path.is_file()
    has_codex = has_codex_section(agents_path)

    locations = None
    for present, path in (
        (has_cursor, cursor_path),
        (has_claude, claude_path),
        (has_codex, agents_path),
    ):
        if present:
            locations = parse_rule_locations(path.read_text(encoding="utf-8"))
            if locations:
                logger.debug("Recovered board settings from %s", path)
                break

    if locations is None:
        raise SyncError("No Statecraft rule files found. Run `statecraft init` first.")

    board_path, spec_dir = locations
    board_dir = posixpath.dirname(board_path) or "."
    defaults = RuleOptions()
    return StatecraftConfig(
        board_path=board_path,
        tasks_dir=posixpath.relpath(spec_dir, board_dir),
        strict_mode=defaults.strict_mode,
        require_spec_file=defaults.require_spec_file,
        include_task_spec_format=defaults.include_task_spec_format,
        cursor=has_cursor,
        claude=has_claude,
        codex=has_codex,
    )


def run_sync(cwd: Path | None = None, dry_run: bool = False) -> SyncResult:
    """
    Rewrite the enabled rule files.

    Args:
        cwd: Project directory (defaults to current directory)
        dry_run: Report what would change without writing anything

    Returns:
        SyncResult describing the files touched

    Raises:
        ConfigError: If .statecraft.json exists but is invalid
        SyncError: If no settings can be found or no rule file is enabled
    """
    if cwd is None:
        cwd = Path.cwd()
    result = SyncResult(dry_run=dry_run)

    config = load_config(cwd)
    recovered = config is None
    if config is None:
        config = _recover_config(cwd)

    spec_dir = spec_dir_for(config.board_path, config.tasks_dir)
    options = config.rule_options
    verb = "Would update" if dry_run else "Updated"

    targets = []
    if config.cursor:
        targets.append(
            (CURSOR_RULE_PATH, build_cursor_rule_content(config.board_path, spec_dir, options))
        )
    if config.claude:
        targets.append(
            (CLAUDE_RULE_PATH, build_claude_rule_content(config.board_path, spec_dir, options))
        )

    for rel_path, content in targets:
        if not dry_run:
            path = cwd / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        result.updated.append(rel_path.as_posix())
        result.messages.append(f"{verb} {rel_path.as_posix()}")

    if config.codex:
        if not dry_run:
            section = build_codex_agents_content(config.board_path, spec_dir, options)
            upsert_codex_section(cwd / AGENTS_PATH, section)
        result.updated.append(AGENTS_PATH.as_posix())
        result.messages.append(f"{verb} Statecraft section in {AGENTS_PATH.as_posix()}")

    if not result.updated:
        raise SyncError(
            "No rule files to sync (cursor, claude, and codex are all false or no files found)."
        )

    if recovered and not dry_run:
        save_config(config, cwd)
        result.wrote_config = True
        result.messages.append("Wrote .statecraft.json for future syncs")

    return result
