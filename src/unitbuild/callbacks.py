"""Progress callback protocol for unit execution.

Defines the callback interface used by Unit.run() to report when unit
actions start, finish or fail.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class UnitCallback(Protocol):
    """Protocol for receiving execution updates from units.

    Only units whose action actually runs produce events. A unit that is
    already finished is skipped silently.
    """

    def on_unit_start(self, name: str) -> None:
        """Called right before a unit's action is invoked.

        Args:
            name: Name of the unit.
        """
        ...

    def on_unit_finish(self, name: str, elapsed: float) -> None:
        """Called after a unit's action completed and the unit is finished.

        Args:
            name: Name of the unit.
            elapsed: Time spent in the action, in seconds.
        """
        ...

    def on_unit_failed(self, name: str, error: BaseException) -> None:
        """Called when a unit's action raised.

        Args:
            name: Name of the unit.
            error: The exception raised by the action.
        """
        ...


class NullCallback:
    """No-op callback implementation for tests and quiet builds."""

    def on_unit_start(self, name: str) -> None:
        """Discard start event."""
        pass

    def on_unit_finish(self, name: str, elapsed: float) -> None:
        """Discard finish event."""
        pass

    def on_unit_failed(self, name: str, error: BaseException) -> None:
        """Discard failure event."""
        pass
