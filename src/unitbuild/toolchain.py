"""Go toolchain wrappers for unit actions.

Each helper runs `go -C <dir> <subcommand> ...` with the build's standard
streams attached. A non-zero exit raises CommandError, so the unit running
the action fails and the build stops.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .errors import CommandError
from .subprocess_utils import look_path, safe_run

logger = logging.getLogger(__name__)

GO_EXECUTABLE = "go"


def go(directory: Union[str, Path], *args: str) -> None:
    """Run the go tool with arbitrary arguments in directory.

    Raises:
        CommandError: If go exits with a non-zero status.
    """
    # -C must be the first flag on the go command line.
    cmd = [look_path(GO_EXECUTABLE), "-C", os.fspath(directory), *args]
    logger.debug("Running: %s", " ".join(cmd))
    result = safe_run(cmd)
    if result.returncode != 0:
        raise CommandError(" ".join([GO_EXECUTABLE, *args[:1]]), result.returncode)


def go_build(directory: Union[str, Path], *args: str) -> None:
    """Run `go build` in directory."""
    go(directory, "build", *args)


def go_install(directory: Union[str, Path], *args: str) -> None:
    """Run `go install` in directory."""
    go(directory, "install", *args)


def go_get(directory: Union[str, Path], *args: str) -> None:
    go(directory, "get", *args)


def go_mod(directory: Union[str, Path], *args: str) -> None:
    go(directory, "mod", *args)


def go_test(directory: Union[str, Path], *args: str) -> None:
    """Run `go test` in directory."""
    go(directory, "test", *args)


def go_clean(directory: Union[str, Path], *args: str) -> None:
    go(directory, "clean", *args)


def go_run(directory: Union[str, Path], *args: str) -> None:
    go(directory, "run", *args)


def parse_go_env(text: str) -> dict[str, str]:
    """Parse the output of `go env`.

    Lines look like KEY=VALUE (or `set KEY=VALUE` on Windows). Values may be
    empty and may be wrapped in single or double quotes. Keys are upper-cased.
    """
    env: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith("set "):
            line = line[4:].strip()
        if not line or "=" not in line:
            continue

        key, _, value = line.partition("=")
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        env[key.upper()] = value
    return env


def go_env_list() -> dict[str, str]:
    """Return every variable reported by `go env`.

    Raises:
        CommandError: If go env fails.
    """
    result = safe_run([look_path(GO_EXECUTABLE), "env"], capture_output=True, text=True)
    if result.returncode != 0:
        raise CommandError("go env", result.returncode, result.stderr)
    return parse_go_env(result.stdout)


def go_env(key: str) -> Optional[str]:
    """Return the value of one `go env` variable, or None if go does not define it.

    The value may be an empty string when the key is present without a value.
    """
    return go_env_list().get(key.upper())


def sys_env(key: str) -> Optional[str]:
    """Return the system environment variable key, or None if unset.

    Not the same as go_env(): this only looks at the process environment.
    """
    return os.environ.get(key)


def go_available() -> bool:
    """Return True if a go executable can be found on PATH."""
    try:
        return safe_run([look_path(GO_EXECUTABLE), "version"], capture_output=True).returncode == 0
    except OSError:
        return False

