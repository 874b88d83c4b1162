"""
Dependency graph over a board snapshot.

Provides a pure query object built from a Board. Immutable after
construction. Used by summarize() for the blocked section, by validation for
cycle warnings and by the render API.
"""

from __future__ import annotations

from collections.abc import Iterator

from .models import Board


class BoardGraph:
    """Immutable dependency graph built from a board.

    The graph models two kinds of edges:

    * **forward edge** (``depends_on``): task A depends on task B, so A is
      blocked until B reaches the last column.
    * **reverse edge** (``dependents``): finishing B unblocks A.

    Dependency ids that do not name a task are ignored here; validation
    reports them as ``DEPENDS_ON_INVALID``.

    Example::

        graph = BoardGraph(parse_board("board.yaml"))
        graph.blocked()   # {"AUTH-12": ["AUTH-7"]}
    """

    __slots__ = ("_order", "_forward", "_reverse", "_statuses", "_done")

    def __init__(self, board: Board) -> None:
        self._order: list[str] = list(board.tasks)
        self._statuses: dict[str, str] = {tid: t.status for tid, t in board.tasks.items()}
        self._done: str = board.last_column

        # forward[A] = [B, C] means A depends on B and C (declared order kept)
        self._forward: dict[str, list[str]] = {}
        # reverse[B] = {A} means finishing B unblocks A
        self._reverse: dict[str, set[str]] = {}

        for task_id, task in board.tasks.items():
            deps = [dep for dep in task.dependencies if dep in self._statuses]
            self._forward[task_id] = deps
            for dep_id in deps:
                self._reverse.setdefault(dep_id, set()).add(task_id)

    def unmet_dependencies(self, task_id: str) -> list[str]:
        """Dependencies of *task_id* whose task is not in the last column."""
        return [
            dep for dep in self._forward.get(task_id, []) if self._statuses[dep] != self._done
        ]

    def blocked(self) -> dict[str, list[str]]:
        """Map each blocked task id (board order) to its unmet dependency ids."""
        result: dict[str, list[str]] = {}
        for task_id in self._order:
            unmet = self.unmet_dependencies(task_id)
            if unmet:
                result[task_id] = unmet
        return result

    def dependents(self, task_id: str) -> list[str]:
        """Task ids that directly depend on *task_id*."""
        return sorted(self._reverse.get(task_id, set()))

    def cycles(self) -> list[list[str]]:
        """Find dependency cycles.

        Returns one list of task ids per strongly connected component that
        contains a cycle (including a task that depends on itself). Ids
        within a cycle are sorted, and cycles are sorted by their first id.
        """
        index_of: dict[str, int] = {}
        lowlink: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        found: list[list[str]] = []
        counter = 0

        for root in self._order:
            if root in index_of:
                continue

            # Explicit work stack of (node, iterator over its dependencies)
            work: list[tuple[str, Iterator[str]]] = []
            index_of[root] = lowlink[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            work.append((root, iter(self._forward.get(root, []))))

            while work:
                node, deps = work[-1]
                descended = False
                for dep in deps:
                    if dep not in index_of:
                        index_of[dep] = lowlink[dep] = counter
                        counter += 1
                        stack.append(dep)
                        on_stack.add(dep)
                        work.append((dep, iter(self._forward.get(dep, []))))
                        descended = True
                        break
                    if dep in on_stack:
                        lowlink[node] = min(lowlink[node], index_of[dep])
                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])

                if lowlink[node] == index_of[node]:
                    component: list[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1 or node in self._forward.get(node, []):
                        found.append(sorted(component))

        return sorted(found, key=lambda cycle: cycle[0])
