"""
Data models for a parsed statecraft board.

The parser turns YAML into these models; validation, summarization and the
render server consume them. One board per file: an ordered list of columns
plus a mapping of task id to task.

Example board file:

```yaml
board: Payments
columns:
  - Backlog
  - Ready
  - name: In Progress
    limit: 3
  - Done
tasks:
  AUTH-12:
    title: Rotate API keys
    status: In Progress
    depends_on: AUTH-7
```
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Exact names and order required by validate()
CANONICAL_COLUMNS: tuple[str, ...] = ("Backlog", "Ready", "In Progress", "Done")


class Column(BaseModel):
    """
    A named lane on the board.

    String columns in YAML are normalized to ``Column(name=...)`` by the parser.
    """

    name: str = Field(..., min_length=1, description="Column name")
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Optional WIP limit (max tasks in this column)",
    )


class Task(BaseModel):
    """
    A unit of work on the board.

    ``status`` is expected to match one of the board's column names.
    ``depends_on`` is always a list once parsed (a single string id is
    normalized to a one-element list) or None when absent.
    """

    title: str = Field(..., description="Task title")
    status: str = Field(..., description="Column name the task currently sits in")
    description: str | None = Field(default=None, description="Longer description")
    spec: str | None = Field(
        default=None,
        description="Path to the task spec file, relative to the board directory",
    )
    owner: str | None = Field(default=None, description="Who is working on it")
    priority: str | None = Field(default=None, description="Free-form priority label")
    depends_on: list[str] | None = Field(
        default=None,
        description="Ids of tasks this task depends on",
    )

    @property
    def dependencies(self) -> list[str]:
        """Dependency ids, empty when none are declared."""
        return self.depends_on or []


class Board(BaseModel):
    """
    A whole board document.

    The board name is stored in the ``board`` key of the YAML file, exposed
    here as ``name``.

    Example:
        >>> board = Board(
        ...     name="Demo",
        ...     columns=[Column(name="Backlog"), Column(name="Done")],
        ...     tasks={"T1": Task(title="Write docs", status="Backlog")},
        ... )
        >>> board.column_names
        ['Backlog', 'Done']
        >>> board.to_dict()["board"]
        'Demo'
    """

    name: str = Field(..., alias="board", min_length=1, description="Board name")
    columns: list[Column] = Field(..., description="Columns in display order")
    tasks: dict[str, Task] = Field(default_factory=dict, description="Tasks keyed by id")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def column_names(self) -> list[str]:
        """Column names in board order."""
        return [column.name for column in self.columns]

    @property
    def last_column(self) -> str:
        """Name of the last column (the "done" lane), or "" for a board without columns."""
        return self.columns[-1].name if self.columns else ""

    def column_index(self) -> dict[str, int]:
        """
        Map column name to its position.

        With duplicate names the later position wins.
        """
        return {name: index for index, name in enumerate(self.column_names)}

    def count_by_status(self) -> dict[str, int]:
        """Count tasks per status value, including statuses with no matching column."""
        counts: dict[str, int] = {}
        for task in self.tasks.values():
            counts[task.status] = counts.get(task.status, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the YAML-shaped mapping, omitting absent fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
