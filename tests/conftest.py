"""Pytest configuration and fixtures for unitbuild tests."""

import sys
import threading

import pytest

from unitbuild import output
from unitbuild.registry import UnitRegistry, reset_default_registry


class OrderLog:
    """Append-only log shared by unit actions to record execution order."""

    def __init__(self) -> None:
        self.entries: list[str] = []
        self._lock = threading.Lock()

    def action(self, name: str):
        """Return an action that appends name to the log."""

        def _append() -> None:
            with self._lock:
                self.entries.append(name)

        return _append

    def count(self, name: str) -> int:
        with self._lock:
            return self.entries.count(name)


@pytest.fixture
def registry() -> UnitRegistry:
    """A fresh, empty registry."""
    return UnitRegistry()


@pytest.fixture
def order_log() -> OrderLog:
    return OrderLog()


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """Reset the default registry and output settings around each test."""
    reset_default_registry()
    output.set_verbose(False)
    output.init_timer()
    yield
    reset_default_registry()
    output.set_verbose(False)
    output.init_timer()


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are always restored after each test."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__
