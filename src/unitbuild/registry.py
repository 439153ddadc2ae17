"""Registry mapping case-insensitive unit names to units.

A registry represents one build session. Registration normally happens
before the build runs; both are serialized by the registry's session lock.
"""

import logging
import threading
from typing import Callable, Iterable, Iterator, Optional

from .errors import UnknownUnitError
from .unit import Unit, UnitFunc

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Return the lookup key for a unit name."""
    return name.lower()


class UnitRegistry:
    """Collection of build units keyed by lower-cased name.

    Usage:
        registry = UnitRegistry()
        assets = registry.register("assets", install_assets, is_default=True)
        app = registry.register("app", build_app, is_default=True)
        app.add_dependency(assets)
        run_build(registry, sys.argv[1:])
    """

    def __init__(self) -> None:
        self._units: dict[str, Unit] = {}
        # Reentrant so that actions running under the build may still register units.
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Session lock serializing registration and build invocations."""
        return self._lock

    def register(self, name: str, action: UnitFunc, is_default: bool = False) -> Unit:
        """Create a unit and bind it under name.

        An existing unit with the same (case-insensitive) name is replaced.
        References to the old unit stay valid but it is no longer reachable
        by name.

        Args:
            name: Unit name.
            action: Zero-argument callable doing the work.
            is_default: Whether the unit runs when no units are requested.

        Returns:
            The new unit.

        Raises:
            ValueError: If name is empty.
        """
        key = normalize_name(name)
        if not key:
            raise ValueError("Unit name must be a non-empty string")

        unit = Unit(name, action, is_default)
        with self._lock:
            if key in self._units:
                logger.debug("Replacing unit %s", key)
            self._units[key] = unit
        return unit

    def unit(
        self,
        name: Optional[str] = None,
        *,
        default: bool = False,
        depends: Iterable[str] = (),
    ) -> Callable[[UnitFunc], UnitFunc]:
        """Decorator form of register().

        The decorated function is registered under name (or its own name)
        and made to depend on the already registered units named in depends.

        Usage:
            @registry.unit(default=True, depends=["assets"])
            def app():
                ...
        """

        def decorator(func: UnitFunc) -> UnitFunc:
            new_unit = self.register(name or func.__name__, func, default)
            for dep_name in depends:
                new_unit.add_dependency(self.get(dep_name))
            return func

        return decorator

    def lookup(self, name: str) -> Optional[Unit]:
        """Return the unit registered under name, or None."""
        with self._lock:
            return self._units.get(normalize_name(name))

    def get(self, name: str) -> Unit:
        """Return the unit registered under name.

        Raises:
            UnknownUnitError: If no unit is registered under name.
        """
        unit = self.lookup(name)
        if unit is None:
            raise UnknownUnitError(normalize_name(name))
        return unit

    def default_units(self) -> list[Unit]:
        """Return all units flagged as default, sorted by name."""
        with self._lock:
            return [self._units[key] for key in sorted(self._units) if self._units[key].is_default]

    def names(self) -> list[str]:
        """Return the lower-cased names of all units, sorted."""
        with self._lock:
            return sorted(self._units)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.lookup(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._units)

    def __iter__(self) -> Iterator[Unit]:
        with self._lock:
            units = [self._units[key] for key in sorted(self._units)]
        return iter(units)


_default_registry: Optional[UnitRegistry] = None
_default_registry_lock = threading.Lock()


def default_registry() -> UnitRegistry:
    """Return the process-wide registry used by the module-level helpers.

    Created on first use.
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = UnitRegistry()
        return _default_registry


def reset_default_registry() -> None:
    """Drop the process-wide registry. The next use creates a fresh one."""
    global _default_registry
    with _default_registry_lock:
        _default_registry = None
