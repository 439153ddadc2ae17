"""Build orchestration: selects which units to run and runs them.

run_build() is the single entry point of the execution phase. It resolves
the requested names against a registry (falling back to the default units
when nothing was requested) and runs each resolved unit in request order.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from . import output
from .callbacks import NullCallback, UnitCallback
from .plan import execution_order
from .registry import UnitRegistry, normalize_name
from .unit import Unit

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a successful build invocation.

    Attributes:
        requested: Lower-cased names of the units that were requested (or
            the default units when nothing was requested)
        executed: Names of the units whose action ran, in execution order
        elapsed: Total wall-clock time in seconds
    """

    requested: list[str]
    executed: list[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def executed_count(self) -> int:
        return len(self.executed)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "requested": list(self.requested),
            "executed": list(self.executed),
            "elapsed": self.elapsed,
        }


class _RecordingCallback:
    """Records finished units and forwards every event to another callback."""

    def __init__(self, inner: UnitCallback) -> None:
        self.inner = inner
        self.executed: list[str] = []

    def on_unit_start(self, name: str) -> None:
        self.inner.on_unit_start(name)

    def on_unit_finish(self, name: str, elapsed: float) -> None:
        self.executed.append(name)
        self.inner.on_unit_finish(name, elapsed)

    def on_unit_failed(self, name: str, error: BaseException) -> None:
        self.inner.on_unit_failed(name, error)


def _requested_names(registry: UnitRegistry, names: Sequence[str]) -> list[str]:
    if names:
        return [normalize_name(name) for name in names]
    return [normalize_name(unit.name) for unit in registry.default_units()]


def run_build(
    registry: UnitRegistry,
    names: Sequence[str],
    callback: Optional[UnitCallback] = None,
) -> BuildResult:
    """Run the requested units, or the default units if none are requested.

    Names are resolved one at a time, in order. Units already finished in
    this session are not run again.

    Args:
        registry: Registry holding the units.
        names: Requested unit names (case-insensitive). Empty means defaults.
        callback: Optional receiver for unit start/finish/failure events.

    Returns:
        BuildResult describing what ran.

    Raises:
        UnknownUnitError: If a requested name is not registered. Names after
            it are not processed.
        UnitFailedError: If a unit's action raised. No further units run.
    """
    start_time = time.monotonic()
    recorder = _RecordingCallback(callback if callback is not None else NullCallback())

    with registry.lock:
        requested = _requested_names(registry, names)
        if not names:
            logger.debug("No units requested, using defaults: %s", ", ".join(requested) or "<none>")

        for name in requested:
            registry.get(name).run(recorder)

    return BuildResult(
        requested=requested,
        executed=recorder.executed,
        elapsed=time.monotonic() - start_time,
    )


def plan_build(registry: UnitRegistry, names: Sequence[str], include_finished: bool = False) -> list[Unit]:
    """Return the units run_build() would execute for names, in order.

    Nothing is run.

    Raises:
        UnknownUnitError: If a requested name is not registered.
        CyclicDependencyError: If the reachable graph contains a cycle.
    """
    with registry.lock:
        units = [registry.get(name) for name in _requested_names(registry, names)]
        return execution_order(units, include_finished=include_finished)


class _OutputCallback:
    """Reports unit progress through the timestamped output module."""

    def on_unit_start(self, name: str) -> None:
        output.log_unit(name)

    def on_unit_finish(self, name: str, elapsed: float) -> None:
        output.log_detail(f"Done ({elapsed:.2f}s)", verbose_only=True)

    def on_unit_failed(self, name: str, error: BaseException) -> None:
        output.log_detail(f"Failed: {error}")


class BuildOrchestrator:
    """Runs builds against a registry and reports progress on the console.

    Args:
        registry: Registry holding the units.
        verbose: Whether to show per-unit timing details.
    """

    def __init__(self, registry: UnitRegistry, verbose: bool = False) -> None:
        self.registry = registry
        self.verbose = verbose

    def build(self, names: Sequence[str]) -> BuildResult:
        """Run the requested units (or the defaults) with console output.

        Raises:
            UnknownUnitError: If a requested name is not registered.
            UnitFailedError: If a unit's action raised.
        """
        output.set_verbose(self.verbose)
        if names:
            output.log(f"Building units: {', '.join(names)}", verbose_only=True)
        else:
            output.log("Building default units", verbose_only=True)

        result = run_build(self.registry, names, _OutputCallback())
        output.log_build_complete(result.elapsed, result.executed_count)
        return result

    def plan(self, names: Sequence[str]) -> list[Unit]:
        """Return the execution plan for names without running anything."""
        return plan_build(self.registry, names)
