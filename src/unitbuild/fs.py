"""File-system helpers for unit actions.

Thin wrappers over os/shutil with build-friendly semantics (directory copies
merge into existing destinations, deleting a missing directory is not an
error). Failures raise the underlying OSError, which the unit running the
action reports as a UnitFailedError.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def file_exists(path: PathLike) -> bool:
    """Return True if path exists and is not a directory."""
    return os.path.exists(path) and not os.path.isdir(path)


def dir_exists(path: PathLike) -> bool:
    """Return True if path exists and is a directory."""
    return os.path.isdir(path)


def join(*parts: PathLike) -> str:
    """Join path elements, skipping empty ones, and normalize the result.

    Returns an empty string if every element is empty.
    """
    non_empty = [os.fspath(p) for p in parts if os.fspath(p)]
    if not non_empty:
        return ""
    return os.path.normpath(os.path.join(*non_empty))


def abspath(path: PathLike) -> str:
    return os.path.abspath(path)


def chdir(path: PathLike) -> None:
    os.chdir(path)


def mkdir(path: PathLike, mode: int = 0o777) -> None:
    """Create a single directory. The parent must exist."""
    os.mkdir(path, mode)


def mkdir_all(path: PathLike, mode: int = 0o777) -> None:
    """Create a directory and any missing parents. Existing directories are fine."""
    os.makedirs(path, mode, exist_ok=True)


def make_temp_dir(directory: Optional[PathLike] = None, prefix: Optional[str] = None) -> str:
    """Create a new temporary directory and return its path.

    The caller owns the directory and is responsible for removing it.
    """
    return tempfile.mkdtemp(prefix=prefix, dir=directory)


def delete_files(*paths: PathLike) -> None:
    """Delete files. A missing file is an error."""
    for path in paths:
        logger.debug("Deleting file %s", path)
        os.remove(path)


def delete_dirs(*paths: PathLike) -> None:
    """Recursively delete directories. Missing directories are ignored."""
    for path in paths:
        if not os.path.lexists(path):
            continue
        logger.debug("Deleting directory %s", path)
        shutil.rmtree(path)


def copy_file(dst: PathLike, src: PathLike) -> None:
    """Copy the contents of file src to file dst, replacing dst."""
    logger.debug("Copying %s -> %s", src, dst)
    shutil.copyfile(src, dst)


def copy_dir(dst: PathLike, src: PathLike) -> None:
    """Recursively copy directory src into directory dst.

    dst is created if needed; files already in dst are overwritten, other
    existing files are left alone.
    """
    logger.debug("Copying directory %s -> %s", src, dst)
    shutil.copytree(src, dst, copy_function=shutil.copyfile, dirs_exist_ok=True)


def move_file(dst: PathLike, src: PathLike) -> None:
    """Move file src to dst (copy, then delete the source)."""
    copy_file(dst, src)
    delete_files(src)


def read_file(path: PathLike) -> bytes:
    return Path(path).read_bytes()


def write_file(path: PathLike, data: Union[bytes, str]) -> None:
    """Create or truncate path and write data to it. str is written as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    Path(path).write_bytes(data)
