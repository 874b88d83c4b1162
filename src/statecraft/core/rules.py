"""
AI assistant rule files for statecraft projects.

Generates the instructions that tell Cursor, Claude and Codex where the
board lives and how to move tasks through it:

- Cursor: ``.cursor/rules/statecraft.mdc`` (YAML front matter + body)
- Claude: ``.claude/rules/statecraft.md`` (body only)
- Codex:  a ``## Statecraft (generated by statecraft init)`` section in
  ``AGENTS.md``, replaced in place on later syncs

The rule body embeds the board path and task spec directory in a fixed
format so ``statecraft sync`` can recover them from an existing rule file.
"""

import logging
import re
from enum import Enum
from pathlib import Path

import frontmatter

from statecraft.core.config.models import RuleOptions

logger = logging.getLogger(__name__)

CURSOR_RULE_PATH = Path(".cursor") / "rules" / "statecraft.mdc"
CLAUDE_RULE_PATH = Path(".claude") / "rules" / "statecraft.md"
AGENTS_PATH = Path("AGENTS.md")

CODEX_MARKER = "## Statecraft (generated by statecraft init)"

BOARD_PATH_RE = re.compile(r"\*\*Board file:\*\*\s*`([^`]+)`")
TASKS_DIR_RE = re.compile(r"\*\*Task spec files:\*\*\s*`([^`]+)/<task-id>\.md`")
HEADING_RE = re.compile(r"^(#+) ")
FENCE = "```"

TASK_SPEC_TEMPLATE = """\
```markdown
# <task-id>: <title>

## Description

What needs to happen and why.

## Definition of Done

- [ ] Acceptance criterion
- [ ] Tests cover the change
```
"""


class UpsertAction(str, Enum):
    """Action taken when writing the Codex section into AGENTS.md."""

    CREATED = "created"
    APPENDED = "appended"
    REPLACED = "replaced"


def build_rule_body(
    board_path: str, tasks_dir: str, options: RuleOptions | None = None
) -> str:
    """
    Build the shared rule text.

    Args:
        board_path: Board file path as the assistant should see it
        tasks_dir: Directory of task spec files, relative to the project root
        options: Rule switches (defaults to RuleOptions())

    Returns:
        Markdown rule body ending with a newline
    """
    if options is None:
        options = RuleOptions()

    strict = ""
    if options.strict_mode:
        strict = (
            f"- **Strict mode:** after every edit to the board run "
            f"`statecraft validate {board_path}` and fix all errors before continuing. "
            f"Never leave the board invalid.\n"
        )

    spec_required = ""
    if options.require_spec_file:
        spec_required = (
            f" Every task must have a `spec` file (`{tasks_dir}/<task-id>.md`) "
            f"before it moves to **Ready**."
        )

    body = f"""# Statecraft

This project uses Statecraft for the task board.

- **Board file:** `{board_path}`
- **Task spec files:** `{tasks_dir}/<task-id>.md` (relative to board directory)
- **Columns (canonical):** Backlog → Ready → In Progress → Done.

## Commands

- Get board format spec: `statecraft spec`
- Validate board: `statecraft validate {board_path}`
- Summarize board: `statecraft summarize {board_path}`
- View board in browser: `statecraft render {board_path}`
{strict}
## Task lifecycle (edit board and task files directly)

- **Prepare for work:** When the task has a clear definition and dependencies are satisfied, \
set `status` to **Ready**.{spec_required}
- **Start work:** Set the task's `status` to **In Progress**. Optionally open/read the task's \
`spec` file.
- **Finish work:** Set the task's `status` to **Done** only when the task's acceptance criteria \
(in its spec file) are satisfied.
- **Create task:** Add an entry under `tasks` with `status: Backlog` (id, title, optional \
description, spec, owner, priority, depends_on). If needed, create `{tasks_dir}/<task-id>.md` \
with description and DoD.

## AI guidelines for creating tickets

- **Task naming:** kebab-case, verb or noun phrase (e.g. `fix-auth-timeout`).
- **Description:** One line summary; optional markdown for context.
- **Definition of Done:** Acceptance criteria in task spec; all checked before moving to Done.
- **Task fields:** `title` (required), `status` (required), optional `description`, \
`spec` (path to .md), `owner`, `priority`, `depends_on`.
- **Spec file:** Path relative to board directory, e.g. `{tasks_dir}/<task-id>.md`.
"""

    if options.include_task_spec_format:
        body += f"\n## Task spec file format\n\n{TASK_SPEC_TEMPLATE}"

    return body


def build_cursor_rule_content(
    board_path: str, tasks_dir: str, options: RuleOptions | None = None
) -> str:
    """Cursor rule: front matter (description, globs, alwaysApply) plus the body."""
    post = frontmatter.Post(
        build_rule_body(board_path, tasks_dir, options),
        description="Statecraft task board: where it lives and how to update it",
        globs=board_path,
        alwaysApply=False,
    )
    return frontmatter.dumps(post).rstrip("\n") + "\n"


def build_claude_rule_content(
    board_path: str, tasks_dir: str, options: RuleOptions | None = None
) -> str:
    """Claude rule: the body with no front matter."""
    return build_rule_body(board_path, tasks_dir, options)


def _demote_headings(body: str) -> str:
    """Push markdown headings down two levels, leaving fenced blocks alone."""
    lines = []
    in_fence = False
    for line in body.splitlines(keepends=True):
        if line.startswith(FENCE):
            in_fence = not in_fence
        elif not in_fence:
            line = HEADING_RE.sub(r"\1## ", line)
        lines.append(line)
    return "".join(lines)


def _section_end(text: str, start: int) -> int:
    """Offset of the first ``## `` heading after *start* outside fenced blocks."""
    offset = start
    in_fence = False
    for line in text[start:].splitlines(keepends=True):
        if line.startswith(FENCE):
            in_fence = not in_fence
        elif not in_fence and offset > start and line.startswith("## "):
            return offset - 1
        offset += len(line)
    return len(text)


def build_codex_agents_content(
    board_path: str, tasks_dir: str, options: RuleOptions | None = None
) -> str:
    """
    Codex section for AGENTS.md.

    Body headings are pushed down two levels so the section ends at the next
    ``## `` heading of the surrounding file.
    """
    body = build_rule_body(board_path, tasks_dir, options)
    demoted = _demote_headings(body)
    return f"{CODEX_MARKER}\n\n{demoted}"


def parse_rule_locations(content: str) -> tuple[str, str] | None:
    """
    Recover ``(board_path, tasks_dir)`` from generated rule text.

    Front matter, if any, is ignored.

    Returns:
        The pair, or None if the rule does not carry both locations
    """
    body = frontmatter.loads(content).content
    board_match = BOARD_PATH_RE.search(body)
    tasks_match = TASKS_DIR_RE.search(body)
    if not board_match or not tasks_match:
        return None
    return board_match.group(1).strip(), tasks_match.group(1).strip()


def has_codex_section(agents_path: Path) -> bool:
    """Whether AGENTS.md exists and carries a Statecraft section."""
    return agents_path.is_file() and CODEX_MARKER in agents_path.read_text(encoding="utf-8")


def upsert_codex_section(agents_path: Path, section: str) -> UpsertAction:
    """
    Insert or replace the Statecraft section of AGENTS.md.

    - File doesn't exist: creates it with the section only
    - File exists without the marker: appends the section after a blank line
    - Marker present: replaces everything from the marker to the next ``## ``
      heading (or end of file), keeping the rest of the file

    Args:
        agents_path: Path to AGENTS.md
        section: Full section text starting with CODEX_MARKER

    Returns:
        UpsertAction describing what happened
    """
    section = section.strip()

    if not agents_path.exists():
        agents_path.parent.mkdir(parents=True, exist_ok=True)
        agents_path.write_text(section + "\n", encoding="utf-8")
        return UpsertAction.CREATED

    existing = agents_path.read_text(encoding="utf-8")
    start = existing.find(CODEX_MARKER)

    if start == -1:
        separator = "\n\n" if existing.strip() else ""
        agents_path.write_text(existing.rstrip() + separator + section + "\n", encoding="utf-8")
        return UpsertAction.APPENDED

    end = _section_end(existing, start)
    rest = existing[end:].strip("\n")

    new_text = existing[:start] + section + "\n"
    if rest:
        new_text += "\n" + rest + "\n"
    agents_path.write_text(new_text, encoding="utf-8")
    logger.debug("Replaced Statecraft section in %s", agents_path)
    return UpsertAction.REPLACED
