"""Build configuration.

BuildOptions carries the settings a build script receives: the build root,
the output directory, the compilation target and the requested units.
Defaults can be overridden through environment variables:

    UNITBUILD_OUT_DIR   Output directory relative to the root (default "bin")
    UNITBUILD_VERBOSE   "1" enables verbose output
"""

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import CommandError
from .toolchain import go_env, sys_env

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "bin"

_GOOS_BY_PLATFORM = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
}

_GOARCH_BY_MACHINE = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
}


def host_os() -> str:
    """Return the Go name of the host operating system."""
    for prefix, goos in _GOOS_BY_PLATFORM.items():
        if sys.platform.startswith(prefix):
            return goos
    return sys.platform


def host_arch() -> str:
    """Return the Go name of the host CPU architecture."""
    machine = platform.machine().lower()
    return _GOARCH_BY_MACHINE.get(machine, machine)


def find_go_env(key: str, fallback: str) -> str:
    """Look up a Go environment variable.

    Sources, in order:
    1. The process environment (the build may run with custom settings)
    2. `go env`
    3. fallback

    A missing or failing go executable counts as "not defined".
    """
    value = sys_env(key)
    if value is not None:
        return value

    try:
        value = go_env(key)
    except (OSError, CommandError) as e:
        logger.debug("go env %s unavailable: %s", key, e)
        value = None

    return value if value is not None else fallback


@dataclass(frozen=True)
class BuildTarget:
    """Compilation target."""

    os: str
    arch: str

    @classmethod
    def detect(cls) -> "BuildTarget":
        """Target from GOOS/GOARCH, falling back to the host platform."""
        return cls(
            os=find_go_env("GOOS", host_os()),
            arch=find_go_env("GOARCH", host_arch()),
        )

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@dataclass
class BuildOptions:
    """Settings passed to build scripts.

    Attributes:
        root: Absolute build root directory
        output_dir: Output directory, relative to root
        target: Compilation target (detected lazily if not given)
        verbose: Verbose output
        units: Requested unit names (empty means default units)
    """

    root: Path
    output_dir: str = DEFAULT_OUTPUT_DIR
    target: Optional[BuildTarget] = None
    verbose: bool = False
    units: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, root: Optional[Path] = None) -> "BuildOptions":
        """Options with defaults taken from the environment."""
        return cls(
            root=(root if root is not None else Path.cwd()).resolve(),
            output_dir=os.environ.get("UNITBUILD_OUT_DIR") or DEFAULT_OUTPUT_DIR,
            verbose=os.environ.get("UNITBUILD_VERBOSE") == "1",
        )

    @property
    def output_path(self) -> Path:
        """Absolute output directory."""
        return self.root / self.output_dir

    def resolve_target(self) -> BuildTarget:
        """Return the target, detecting and caching it on first use."""
        if self.target is None:
            self.target = BuildTarget.detect()
        return self.target
