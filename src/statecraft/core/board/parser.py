"""
Board parser: YAML text or file -> Board.

Parsing is strict about structure and types and raises ParseError with a
locator (``columns[2].limit``, ``tasks.AUTH-12.status``) on the first problem
found. Semantic checks that can be collected in bulk (canonical columns,
statuses, dependency references, WIP limits) belong to validation instead.
"""

import logging
import os
import re
from collections.abc import Hashable
from pathlib import Path
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from .models import Board, Column, Task

logger = logging.getLogger(__name__)

BOARD_FILE_SUFFIXES = (".yaml", ".yml")

# Optional string fields on a task, in the order they are checked
OPTIONAL_TASK_STRINGS = ("description", "spec", "owner", "priority")

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_MERGE_TAG = "tag:yaml.org,2002:merge"


class BoardLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 style scalars and no duplicate keys.

    Only ``true``/``false`` are booleans and dates stay strings, so
    ``title: yes`` or ``status: on`` read as text. A key repeated in one
    mapping is an error instead of silently replacing the earlier value.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f'found duplicate key "{key}"',
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


BoardLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp) for tag, regexp in resolvers if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
BoardLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class ParseError(Exception):
    """Raised when board content is not valid YAML or has a wrong structure."""


class BoardReadError(ParseError):
    """Raised when a board file cannot be opened or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'Cannot read file "{path}": {reason}')


def _require_mapping(value: Any, path: str) -> dict[Any, Any]:
    if not isinstance(value, dict):
        raise ParseError(f"{path}: expected an object")
    return value


def _require_string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        if isinstance(value, (bool, int, float)):
            raise ParseError(
                f"{path}: expected a string, got {type(value).__name__} "
                "(quote the value to keep it as text)"
            )
        raise ParseError(f"{path}: expected a string")
    return value


def _parse_limit(value: Any, path: str) -> int:
    # bool is an int subclass; YAML `limit: yes` is not a limit
    if isinstance(value, bool):
        raise ParseError(f"{path}: must be a positive integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise ParseError(f"{path}: must be a positive integer")
    return value


def _parse_column(item: Any, index: int) -> Column:
    path = f"columns[{index}]"

    if isinstance(item, str):
        if not item.strip():
            raise ParseError(f"{path}: column name must be non-empty")
        return Column(name=item)

    if isinstance(item, dict):
        if "name" not in item:
            raise ParseError(f'{path}: column object must have "name"')
        name = _require_string(item["name"], f"{path}.name")
        if not name.strip():
            raise ParseError(f"{path}.name: must be non-empty")

        if "limit" not in item:
            return Column(name=name)
        return Column(name=name, limit=_parse_limit(item["limit"], f"{path}.limit"))

    raise ParseError(
        f'{path}: expected a string or object with "name" (and optional "limit")'
    )


def _parse_depends_on(value: Any, path: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        for i, item in enumerate(value):
            _require_string(item, f"{path}[{i}]")
        return list(value)
    raise ParseError(f"{path}: expected a string or array of strings")


def _parse_task(task_id: str, raw: Any) -> Task:
    path = f"tasks.{task_id}"
    data = _require_mapping(raw, path)

    if "title" not in data:
        raise ParseError(f'{path}: missing required field "title"')
    title = _require_string(data["title"], f"{path}.title")

    if "status" not in data:
        raise ParseError(f'{path}: missing required field "status"')
    status = _require_string(data["status"], f"{path}.status")

    fields: dict[str, Any] = {"title": title, "status": status}

    for key in OPTIONAL_TASK_STRINGS:
        if key in data:
            fields[key] = _require_string(data[key], f"{path}.{key}")

    if "depends_on" in data:
        fields["depends_on"] = _parse_depends_on(data["depends_on"], f"{path}.depends_on")

    return Task(**fields)


def parse_board_from_string(content: str) -> Board:
    """
    Parse YAML board content into a Board.

    Args:
        content: Raw YAML text of a board file

    Returns:
        The parsed Board

    Raises:
        ParseError: If the YAML is invalid or required fields are missing/wrong

    Example:
        >>> board = parse_board_from_string(
        ...     "board: Demo\\ncolumns: [Backlog, Done]\\ntasks: {}\\n"
        ... )
        >>> board.column_names
        ['Backlog', 'Done']
    """
    try:
        raw = yaml.load(content, Loader=BoardLoader)  # noqa: S506
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}") from e

    root = _require_mapping(raw, "root")

    # board (required, non-empty string)
    if "board" not in root:
        raise ParseError("Missing required field: board")
    name = _require_string(root["board"], "board")
    if not name.strip():
        raise ParseError("board must be a non-empty string")

    # columns (required, non-empty list)
    if "columns" not in root:
        raise ParseError("Missing required field: columns")
    raw_columns = root["columns"]
    if not isinstance(raw_columns, list):
        raise ParseError("columns: expected an array")
    if not raw_columns:
        raise ParseError("columns must be a non-empty array")
    columns = [_parse_column(item, i) for i, item in enumerate(raw_columns)]

    # tasks (required mapping, may be empty)
    if "tasks" not in root:
        raise ParseError("Missing required field: tasks")
    raw_tasks = root["tasks"]
    if not isinstance(raw_tasks, dict):
        raise ParseError("tasks must be an object (map of task id to task)")
    tasks = {str(task_id): _parse_task(str(task_id), raw) for task_id, raw in raw_tasks.items()}

    return Board(name=name, columns=columns, tasks=tasks)


def looks_like_path(source: str) -> bool:
    """
    Decide whether a string argument names a file rather than holding YAML.

    A string is a path when it has no newline and, stripped, either ends with
    .yaml/.yml or contains a path separator.
    """
    if "\n" in source:
        return False
    trimmed = source.strip()
    if not trimmed:
        return False
    return (
        trimmed.endswith(BOARD_FILE_SUFFIXES)
        or "/" in trimmed
        or os.sep in trimmed
    )


def read_board_file(path: str | os.PathLike[str]) -> str:
    """
    Read a board file as UTF-8 text.

    Raises:
        BoardReadError: If the file is missing, unreadable or not UTF-8
    """
    resolved = Path(path).expanduser().resolve()
    try:
        return resolved.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise BoardReadError(resolved, "no such file or directory") from None
    except IsADirectoryError:
        raise BoardReadError(resolved, "is a directory") from None
    except UnicodeDecodeError as e:
        raise BoardReadError(resolved, f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise BoardReadError(resolved, e.strerror or str(e)) from e


def parse_board(source: str | os.PathLike[str]) -> Board:
    """
    Parse a board from a file path or raw YAML string.

    Path-like objects are always read from disk. Strings are read from disk
    when they look like a path (see looks_like_path), otherwise parsed as
    YAML content directly.

    Args:
        source: File path (absolute or relative to cwd) or raw YAML text

    Returns:
        The parsed Board

    Raises:
        BoardReadError: If source is a path and the file cannot be read
        ParseError: If the content is invalid
    """
    if isinstance(source, os.PathLike) or looks_like_path(source):
        path = source if isinstance(source, os.PathLike) else source.strip()
        content = read_board_file(path)
        logger.debug("Read board file %s (%d bytes)", path, len(content))
        return parse_board_from_string(content)
    return parse_board_from_string(source)
