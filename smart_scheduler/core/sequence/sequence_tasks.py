from __future__ import annotations

import heapq
import logging
from datetime import date

from smart_scheduler.core.errors import CycleError
from smart_scheduler.core.model import Task, TaskRegistry


logger = logging.getLogger("smart_scheduler.sequence")


def priority_key(task: Task) -> tuple[date, float, str]:
    """Earlier due date first, then larger effort, then title."""
    return (task.due_date, -task.estimated_hours, task.title)


def sequence_tasks(registry: TaskRegistry) -> list[str]:
    """Topologically order the registry, ranking ready tasks by priority_key.

    Raises CycleError when some tasks can never become ready.
    """

    tasks = registry.tasks_by_title
    indegree = dict(registry.indegree)

    ready: list[tuple[date, float, str]] = [
        priority_key(tasks[title]) for title, deg in indegree.items() if deg == 0
    ]
    heapq.heapify(ready)

    order: list[str] = []
    while ready:
        _, _, cur = heapq.heappop(ready)
        order.append(cur)
        for nxt in registry.dependents[cur]:
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                heapq.heappush(ready, priority_key(tasks[nxt]))

    if len(order) != len(tasks):
        emitted = set(order)
        blocked = [title for title in tasks if title not in emitted]
        cycle = _find_cycle({t: list(tasks[t].dependencies) for t in blocked})
        logger.info("sequencing stopped: %d of %d tasks blocked", len(blocked), len(tasks))
        message = "dependency cycle detected"
        if cycle:
            message += ": " + " -> ".join(cycle)
        raise CycleError(code="E_CYCLE_DETECTED", message=message, path="tasks")

    logger.info("sequenced %d tasks", len(order))
    return order


def _find_cycle(id_to_deps: dict[str, list[str]]) -> list[str]:
    """Return one cycle (first node repeated at the end), or [] if none.

    Iterative DFS: blocked chains can be far deeper than the recursion limit.
    """
    WHITE, GRAY, BLACK = 0, 1, 2
    state: dict[str, int] = {nid: WHITE for nid in id_to_deps.keys()}

    for root in sorted(state.keys()):
        if state[root] != WHITE:
            continue
        state[root] = GRAY
        path: list[str] = [root]
        frames = [iter(id_to_deps.get(root, []))]
        while frames:
            for v in frames[-1]:
                if v not in state:
                    continue
                if state[v] == GRAY:
                    # path holds a dependency chain, so reverse it to read dependency -> dependent.
                    cycle = path[path.index(v):] + [v]
                    return list(reversed(cycle))
                if state[v] == WHITE:
                    state[v] = GRAY
                    path.append(v)
                    frames.append(iter(id_to_deps.get(v, [])))
                    break
            else:
                state[path.pop()] = BLACK
                frames.pop()
    return []
