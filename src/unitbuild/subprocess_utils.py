"""Process execution helpers for unit actions.

Wraps the subprocess module so that commands started from a build never
open a console window on Windows and never inherit the console input
handle, and turns non-zero exit statuses into CommandError.
"""

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import IO, Any, Optional, Union

from .errors import CommandError

logger = logging.getLogger(__name__)


def get_subprocess_creation_flags() -> int:
    """Return CREATE_NO_WINDOW on Windows and 0 elsewhere."""
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def _apply_platform_defaults(kwargs: dict[str, Any]) -> dict[str, Any]:
    # Explicit creationflags are OR'd with the platform flags; an explicit stdin wins.
    default_flags = get_subprocess_creation_flags()
    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL
    return kwargs


def safe_run(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """subprocess.run() with platform defaults applied.

    Args:
        cmd: Command and arguments
        **kwargs: Passed through to subprocess.run

    Returns:
        CompletedProcess result
    """
    return subprocess.run(cmd, **_apply_platform_defaults(kwargs))


def safe_popen(cmd: list[str], **kwargs: Any) -> subprocess.Popen:
    """subprocess.Popen() with platform defaults applied.

    For commands that should keep running while the build continues.
    """
    return subprocess.Popen(cmd, **_apply_platform_defaults(kwargs))


def look_path(name: str) -> str:
    """Find an executable on PATH.

    A name containing a directory part is checked directly. If nothing is
    found the name is returned as-is so the error surfaces when the command
    is actually started. Symlinks are not followed, so tools that dispatch on
    the name they were started as see the name found on PATH.
    """
    found = shutil.which(name)
    if found is None:
        return name
    return os.path.abspath(found)


def _resolve_command(command: str) -> str:
    if Path(command).is_file():
        return os.path.abspath(command)
    return look_path(command)


def run_redirected(
    command: str,
    *args: str,
    stdin: Optional[IO[Any]] = None,
    stdout: Optional[IO[Any]] = None,
    stderr: Optional[IO[Any]] = None,
    wait: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> bool:
    """Run a command with optional stream redirection.

    Streams left as None are inherited from the build process (stdin is
    redirected to DEVNULL).

    Args:
        command: Executable name or path.
        *args: Command arguments.
        stdin: Stream to read input from.
        stdout: Stream receiving standard output.
        stderr: Stream receiving standard error.
        wait: Wait for the command to finish. When False the command is
            started in the background and True is returned.
        cwd: Working directory for the command.

    Returns:
        False if the command failed and stderr was redirected, True otherwise.

    Raises:
        CommandError: If the command failed and stderr was not redirected.
        OSError: If the command could not be started.
    """
    cmd = [_resolve_command(command), *args]
    kwargs: dict[str, Any] = {"stdout": stdout, "stderr": stderr, "cwd": cwd}
    if stdin is not None:
        kwargs["stdin"] = stdin

    logger.debug("Running: %s", " ".join(cmd))
    if not wait:
        safe_popen(cmd, **kwargs)
        return True

    result = safe_run(cmd, **kwargs)
    if result.returncode != 0:
        if stderr is not None:
            return False
        raise CommandError(command, result.returncode)
    return True


def run(command: str, *args: str, wait: bool = True, cwd: Optional[Union[str, Path]] = None) -> None:
    """Run a command, capturing stderr for the error message.

    Standard output is inherited from the build process.

    Raises:
        CommandError: If the command exits with a non-zero status.
    """
    cmd = [_resolve_command(command), *args]
    logger.debug("Running: %s", " ".join(cmd))
    if not wait:
        safe_popen(cmd, cwd=cwd)
        return

    result = safe_run(cmd, stderr=subprocess.PIPE, text=True, cwd=cwd)
    if result.returncode != 0:
        raise CommandError(command, result.returncode, result.stderr)
