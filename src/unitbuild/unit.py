"""Build units and their dependency graph.

A unit is a named build step wrapping a zero-argument action. Units form a
directed acyclic graph through add_dependency(), and run() executes a unit's
whole dependency subtree before the unit itself. Every unit runs its action
at most once: the check-then-set on the unit state happens under the unit's
own reentrant lock, so a dependency shared by several dependents (a
diamond) still runs exactly once.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from .callbacks import NullCallback, UnitCallback
from .errors import CyclicDependencyError, UnitFailedError

logger = logging.getLogger(__name__)

UnitFunc = Callable[[], None]


class UnitState(Enum):
    """Execution state of a unit."""

    PENDING = "pending"
    FINISHED = "finished"


class Unit:
    """A named build step with an action and a list of prerequisite units.

    Units are normally created through UnitRegistry.register() rather than
    directly.

    Args:
        name: Unit name. Compared case-insensitively by the registry.
        action: Zero-argument callable doing the actual work.
        is_default: Whether the unit runs when no units are requested.
    """

    def __init__(self, name: str, action: UnitFunc, is_default: bool = False) -> None:
        self._name = name
        self._action = action
        self._is_default = is_default
        self._dependencies: list["Unit"] = []
        self._state = UnitState.PENDING
        # Reentrant so that an action may read its own unit or add edges to it.
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Unit({self._name!r}, state={self.state.value}, default={self.is_default})"

    @property
    def name(self) -> str:
        """Name the unit was registered under."""
        return self._name

    @property
    def action(self) -> UnitFunc:
        return self._action

    @property
    def dependencies(self) -> list["Unit"]:
        """Direct dependencies in declaration order (a copy)."""
        with self._lock:
            return list(self._dependencies)

    @property
    def state(self) -> UnitState:
        with self._lock:
            return self._state

    @property
    def is_finished(self) -> bool:
        """True once the unit's action has run to completion."""
        return self.state is UnitState.FINISHED

    @property
    def is_default(self) -> bool:
        """True if the unit runs when no units are requested explicitly."""
        with self._lock:
            return self._is_default

    def set_default(self, value: bool) -> None:
        """Set whether the unit runs when no units are requested explicitly."""
        with self._lock:
            self._is_default = value

    def add_dependency(self, dep: "Unit") -> None:
        """Add dep as a direct dependency of this unit.

        When this unit runs, dep is guaranteed to have finished first. Adding
        a unit that is already reachable through the existing dependencies is
        a no-op.

        Args:
            dep: The unit this unit depends on.

        Raises:
            CyclicDependencyError: If dep is this unit or already depends on
                this unit (directly or indirectly).
        """
        if dep.has_dependency(self):
            raise CyclicDependencyError(
                f"Cyclic dependency: {self._name!r} cannot depend on {dep._name!r} because {dep._name!r} already depends on {self._name!r}"
            )

        with self._lock:
            if self.has_dependency(dep):
                logger.debug("Unit %s already depends on %s, edge ignored", self._name, dep._name)
                return
            self._dependencies.append(dep)

    def has_dependency(self, other: "Unit") -> bool:
        """Return True if this unit depends on other, directly or indirectly.

        The whole dependency graph below this unit is searched. A unit is
        considered to depend on itself.
        """
        if other is self:
            return True

        # Each unit is expanded once, so shared subgraphs are not walked again.
        seen: set[int] = set()
        pending = self.dependencies
        while pending:
            unit = pending.pop()
            if unit is other:
                return True
            if id(unit) in seen:
                continue
            seen.add(id(unit))
            pending.extend(unit.dependencies)
        return False

    def run(self, callback: Optional[UnitCallback] = None) -> bool:
        """Run the unit's dependencies and then the unit itself.

        Dependencies are run depth-first in declaration order. The unit's own
        action runs only if the unit is not finished yet.

        Args:
            callback: Optional receiver for start/finish/failure events.

        Returns:
            True if this call ran the unit's own action.

        Raises:
            UnitFailedError: If this unit's action, or the action of any unit
                in its dependency subtree, raised. The unit stays PENDING.
        """
        if callback is None:
            callback = NullCallback()

        with self._lock:
            for dep in self._dependencies:
                dep.run(callback)

            if self._state is UnitState.FINISHED:
                return False

            callback.on_unit_start(self._name)
            start_time = time.monotonic()
            try:
                self._action()
            except KeyboardInterrupt:
                raise
            except UnitFailedError as e:
                # A nested unit failed inside this action. Keep the original attribution.
                callback.on_unit_failed(self._name, e)
                raise
            except Exception as e:
                logger.debug("Unit %s failed: %s", self._name, e)
                callback.on_unit_failed(self._name, e)
                raise UnitFailedError(self._name, e) from e

            self._state = UnitState.FINISHED
            elapsed = time.monotonic() - start_time

        logger.debug("Unit %s finished in %.2fs", self._name, elapsed)
        callback.on_unit_finish(self._name, elapsed)
        return True
