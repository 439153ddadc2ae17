"""unitbuild - named build units executed in dependency order.

A build declares units (named zero-argument actions), wires them into a
dependency graph and runs a selection of them. Prerequisites always run
before their dependents and every unit runs at most once per session.

Public API:
    UnitRegistry: Explicit collection of units for one build session.
    Unit: A single build step.
    run_build: Run requested units (or the defaults) of a registry.
    plan_build: Compute the execution order without running anything.
    add_unit / build: Shortcuts operating on the process-wide default registry.

Usage:
    import sys
    import unitbuild as ub

    assets = ub.add_unit("assets", install_assets, True)
    app = ub.add_unit("app", build_app, True)
    app.add_dependency(assets)
    ub.add_unit("clean", clean, False)

    ub.build(sys.argv[1:])
"""

from typing import Sequence

from .callbacks import NullCallback, UnitCallback
from .config import BuildOptions, BuildTarget
from .errors import (
    BuildScriptError,
    CommandError,
    CyclicDependencyError,
    UnitBuildError,
    UnitFailedError,
    UnknownUnitError,
)
from .orchestrator import BuildOrchestrator, BuildResult, plan_build, run_build
from .registry import UnitRegistry, default_registry, reset_default_registry
from .unit import Unit, UnitFunc, UnitState

__version__ = "0.3.0"


def add_unit(name: str, action: UnitFunc, is_default: bool = False) -> Unit:
    """Register a unit on the process-wide default registry."""
    return default_registry().register(name, action, is_default)


def build(names: Sequence[str]) -> BuildResult:
    """Run units of the process-wide default registry.

    Raises:
        UnknownUnitError: If a requested name is not registered.
        UnitFailedError: If a unit's action raised.
    """
    return run_build(default_registry(), names)


__all__ = [
    "BuildOptions",
    "BuildOrchestrator",
    "BuildResult",
    "BuildScriptError",
    "BuildTarget",
    "CommandError",
    "CyclicDependencyError",
    "NullCallback",
    "Unit",
    "UnitBuildError",
    "UnitCallback",
    "UnitFailedError",
    "UnitFunc",
    "UnitRegistry",
    "UnitState",
    "UnknownUnitError",
    "__version__",
    "add_unit",
    "build",
    "default_registry",
    "plan_build",
    "reset_default_registry",
    "run_build",
]
