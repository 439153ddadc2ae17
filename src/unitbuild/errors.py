"""Exception types raised by unitbuild.

The core never terminates the process on its own. Every failure is raised
as one of these exceptions and the outermost caller (normally the CLI)
decides how to report it.
"""

from pathlib import Path
from typing import Optional, Union


class UnitBuildError(Exception):
    """Base class for all unitbuild errors."""

    pass


class UnknownUnitError(UnitBuildError, KeyError):
    """Raised when a requested unit name has no registration."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown unit name {self.name!r}"


class UnitFailedError(UnitBuildError):
    """Raised when a unit's action fails.

    Attributes:
        unit_name: Name of the unit whose action raised
        cause: The exception raised by the action
    """

    def __init__(self, unit_name: str, cause: BaseException) -> None:
        self.unit_name = unit_name
        self.cause = cause
        super().__init__(f"unit {unit_name!r} failed: {type(cause).__name__}: {cause}")


class CyclicDependencyError(UnitBuildError, ValueError):
    """Raised when a dependency edge would make the unit graph cyclic."""

    pass


class CommandError(UnitBuildError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: Optional[str] = None) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"{command}: exit status {returncode}"
        if stderr:
            message += f"\n{stderr.rstrip()}"
        super().__init__(message)


class BuildScriptError(UnitBuildError):
    """Raised when a build script cannot be loaded."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
