"""Plain-text board summary for terminals, chat and docs."""

from .graph import BoardGraph
from .models import Board


def summarize(board: Board) -> str:
    """
    Render a deterministic text summary of the board.

    Format: board name, per-column task counts, one line per column at or
    over its WIP limit, the task list ordered by column then id, and an
    optional blocked section.

    Args:
        board: Parsed board

    Returns:
        Summary text ending with exactly one newline
    """
    counts = {name: 0 for name in board.column_names}
    for task in board.tasks.values():
        if task.status in counts:
            counts[task.status] += 1

    lines = [f"Board: {board.name}", ""]

    columns = ", ".join(f"{name} ({counts[name]})" for name in board.column_names)
    lines.append(f"Columns: {columns}")

    for column in board.columns:
        if column.limit is not None and counts[column.name] >= column.limit:
            lines.append(f"  {column.name} at WIP limit ({counts[column.name]}/{column.limit})")

    lines.append("")
    lines.append("Tasks:")

    # Statuses without a column sort after every real column
    position = board.column_index()
    unknown = len(board.columns)
    ordered = sorted(
        board.tasks,
        key=lambda task_id: (position.get(board.tasks[task_id].status, unknown), task_id),
    )
    if not ordered:
        lines.append("  (none)")
    for task_id in ordered:
        task = board.tasks[task_id]
        lines.append(f"  {task_id} [{task.status}] {task.title}")

    blocked = BoardGraph(board).blocked()
    if blocked:
        lines.append("")
        for task_id, deps in blocked.items():
            lines.append(f"Blocked: {task_id} (depends on {', '.join(deps)})")

    return "\n".join(lines) + "\n"
