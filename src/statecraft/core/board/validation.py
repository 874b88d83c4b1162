"""
Board validation rules.

validate() never raises: it runs every rule over a parsed Board and collects
all problems so a single run reports everything. Errors make the board
invalid; warnings are informational and never change ``valid``.

Error rules, in order:
1. Canonical columns (Backlog, Ready, In Progress, Done in that order)
2. Unique column names
3. Every task status names an existing column
4. Every depends_on id names an existing task
5. No column holds more tasks than its WIP limit
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from .graph import BoardGraph
from .models import CANONICAL_COLUMNS, Board


class ValidationCode(str, Enum):
    """Machine-readable codes for validation issues."""

    # Errors
    COLUMNS_NOT_CANONICAL = "COLUMNS_NOT_CANONICAL"
    DUPLICATE_COLUMN = "DUPLICATE_COLUMN"
    STATUS_INVALID = "STATUS_INVALID"
    DEPENDS_ON_INVALID = "DEPENDS_ON_INVALID"
    WIP_LIMIT_EXCEEDED = "WIP_LIMIT_EXCEEDED"

    # Warnings
    DEPENDENCY_CYCLE = "DEPENDENCY_CYCLE"
    SPEC_FILE_MISSING = "SPEC_FILE_MISSING"


class ValidationIssue(BaseModel):
    """A single validation error or warning."""

    message: str = Field(..., description="Human-readable message")
    path: str | None = Field(
        default=None,
        description="Locator for tooling, e.g. 'tasks.AUTH-12.status'",
    )
    code: ValidationCode | None = Field(default=None, description="Issue code")

    def format(self) -> str:
        """Render as ``<path>: <message>`` (or just the message without a path)."""
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ValidationResult(BaseModel):
    """Outcome of validating a board. ``valid`` is True iff there are no errors."""

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


def _check_canonical_columns(board: Board) -> list[ValidationIssue]:
    expected = ", ".join(CANONICAL_COLUMNS)
    if len(board.columns) != len(CANONICAL_COLUMNS):
        return [
            ValidationIssue(
                path="columns",
                message=(
                    f"Board must have exactly {len(CANONICAL_COLUMNS)} columns: {expected}. "
                    f"Got {len(board.columns)}."
                ),
                code=ValidationCode.COLUMNS_NOT_CANONICAL,
            )
        ]

    issues = []
    for i, (wanted, column) in enumerate(zip(CANONICAL_COLUMNS, board.columns)):
        if column.name != wanted:
            issues.append(
                ValidationIssue(
                    path=f"columns[{i}]",
                    message=(
                        f'Column at index {i} must be "{wanted}". Got "{column.name}". '
                        f"Canonical order: {expected}."
                    ),
                    code=ValidationCode.COLUMNS_NOT_CANONICAL,
                )
            )
    return issues


def _check_duplicate_columns(board: Board) -> list[ValidationIssue]:
    issues = []
    seen: set[str] = set()
    for i, column in enumerate(board.columns):
        if column.name in seen:
            issues.append(
                ValidationIssue(
                    path=f"columns[{i}]",
                    message=f'Duplicate column name: "{column.name}"',
                    code=ValidationCode.DUPLICATE_COLUMN,
                )
            )
        seen.add(column.name)
    return issues


def _check_tasks(board: Board) -> list[ValidationIssue]:
    issues = []
    column_names = board.column_names
    valid_columns = ", ".join(column_names)

    for task_id, task in board.tasks.items():
        task_path = f"tasks.{task_id}"

        if task.status not in column_names:
            issues.append(
                ValidationIssue(
                    path=f"{task_path}.status",
                    message=(
                        f'Task status "{task.status}" does not match any column. '
                        f"Valid columns: {valid_columns}"
                    ),
                    code=ValidationCode.STATUS_INVALID,
                )
            )

        for ref_id in task.dependencies:
            if ref_id not in board.tasks:
                issues.append(
                    ValidationIssue(
                        path=f"{task_path}.depends_on",
                        message=f'Task "{task_id}" depends on "{ref_id}", which does not exist',
                        code=ValidationCode.DEPENDS_ON_INVALID,
                    )
                )
    return issues


def _check_wip_limits(board: Board) -> list[ValidationIssue]:
    issues = []
    counts = board.count_by_status()
    for i, column in enumerate(board.columns):
        if column.limit is None:
            continue
        count = counts.get(column.name, 0)
        if count > column.limit:
            issues.append(
                ValidationIssue(
                    path=f"columns[{i}]",
                    message=(
                        f'Column "{column.name}" has limit {column.limit} '
                        f"but {count} task(s) in that status"
                    ),
                    code=ValidationCode.WIP_LIMIT_EXCEEDED,
                )
            )
    return issues


def validate_board(board: Board) -> list[ValidationIssue]:
    """
    Run all error rules on a parsed board.

    Args:
        board: Parsed board

    Returns:
        List of validation errors (empty if valid)
    """
    errors: list[ValidationIssue] = []
    errors.extend(_check_canonical_columns(board))
    errors.extend(_check_duplicate_columns(board))
    errors.extend(_check_tasks(board))
    errors.extend(_check_wip_limits(board))
    return errors


def collect_warnings(board: Board, base_dir: Path | None = None) -> list[ValidationIssue]:
    """
    Collect non-fatal findings.

    Args:
        board: Parsed board
        base_dir: Board directory; when given, task spec paths are checked on disk

    Returns:
        List of warnings
    """
    warnings: list[ValidationIssue] = []

    for cycle in BoardGraph(board).cycles():
        warnings.append(
            ValidationIssue(
                path=f"tasks.{cycle[0]}.depends_on",
                message=f"Dependency cycle between tasks: {', '.join(cycle)}",
                code=ValidationCode.DEPENDENCY_CYCLE,
            )
        )

    if base_dir is not None:
        for task_id, task in board.tasks.items():
            if task.spec and not (base_dir / task.spec).is_file():
                warnings.append(
                    ValidationIssue(
                        path=f"tasks.{task_id}.spec",
                        message=f'Spec file "{task.spec}" not found',
                        code=ValidationCode.SPEC_FILE_MISSING,
                    )
                )

    return warnings


def validate(board: Board, *, base_dir: Path | None = None) -> ValidationResult:
    """
    Validate a parsed board. Does not raise.

    Args:
        board: Parsed board
        base_dir: Optional board directory used to check task spec files

    Returns:
        ValidationResult with ``valid=True`` and no errors when the board is
        valid, otherwise ``valid=False`` and the full list of errors

    Example:
        >>> result = validate(board)
        >>> if not result.valid:
        ...     for error in result.errors:
        ...         print(error.format())
    """
    errors = validate_board(board)
    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=collect_warnings(board, base_dir),
    )
