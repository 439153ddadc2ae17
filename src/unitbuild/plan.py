"""Execution planning for unit graphs.

Computes, without running anything, the order in which Unit.run() would
invoke actions: depth-first over dependencies in declaration order, each
unit emitted once, after everything it depends on.
"""

from typing import Iterable

from .errors import CyclicDependencyError
from .unit import Unit


def execution_order(units: Iterable[Unit], include_finished: bool = False) -> list[Unit]:
    """Return the units that running the given units would execute, in order.

    Args:
        units: Units to run, in request order.
        include_finished: Also list units that are already finished (and
            would therefore be skipped).

    Returns:
        Units in execution order, each at most once.

    Raises:
        CyclicDependencyError: If a cycle is reachable from the given units.
    """
    WHITE, GRAY, BLACK = 0, 1, 2
    color: dict[int, int] = {}
    order: list[Unit] = []

    def visit(unit: Unit, path: list[Unit]) -> None:
        color[id(unit)] = GRAY
        path.append(unit)
        for dep in unit.dependencies:
            state = color.get(id(dep), WHITE)
            if state == GRAY:
                # Back edge
                cycle = path[path.index(dep) :] + [dep]
                raise CyclicDependencyError(f"Cyclic dependency detected: {' -> '.join(u.name for u in cycle)}")
            if state == WHITE:
                visit(dep, path)
        path.pop()
        color[id(unit)] = BLACK
        if include_finished or not unit.is_finished:
            order.append(unit)

    for unit in units:
        if color.get(id(unit), WHITE) == WHITE:
            visit(unit, [])

    return order
