"""
Timestamped build output for unitbuild.

All user-facing output is prefixed with the elapsed time since program
launch in MM:SS.cc format (minutes:seconds.centiseconds), which makes it
easy to see which unit is eating the build time.

Example output:
    00:00.01 unitbuild v0.3.0
    00:00.02 > assets
    00:00.31       Done (0.29s)
    00:00.31 > app
    00:04.87       Done (4.56s)

Usage:
    from unitbuild.output import log, log_detail, init_timer

    init_timer()
    log("Building units: app")
    log_detail("Output: bin/")
"""

import sys
import time
from types import TracebackType
from typing import Optional, TextIO

# Global state for the timer
_start_time: Optional[float] = None
_output_stream: Optional[TextIO] = None
_verbose: bool = False


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Initialize the program timer.

    If not called explicitly, it is called automatically on first log.

    Args:
        output_stream: Optional output stream (defaults to the current sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    _output_stream = output_stream


def reset_timer() -> None:
    """Reset the timer to the current time."""
    global _start_time
    _start_time = time.time()


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for logging.

    Args:
        verbose: If True, verbose_only messages are printed as well.
    """
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    return _verbose


def get_elapsed() -> float:
    """
    Get elapsed time since timer initialization.

    Returns:
        Elapsed time in seconds
    """
    global _start_time
    if _start_time is None:
        init_timer(_output_stream)
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """
    Format the current elapsed time as MM:SS.cc.

    Returns:
        Formatted timestamp string
    """
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _write(stream: TextIO, message: str) -> None:
    stream.write(f"{format_timestamp()} {message}\n")
    stream.flush()


def _print(message: str) -> None:
    # sys.stdout is looked up on every call so redirected streams are honoured.
    _write(_output_stream if _output_stream is not None else sys.stdout, message)


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """
    Log a detail message (indented).

    Args:
        message: Detail message
        indent: Number of spaces to indent (default 6)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_unit(name: str) -> None:
    """Log the start of a unit's action."""
    _print(f"> {name}")


def log_header(title: str, version: str) -> None:
    """
    Log a header message (e.g., program startup).

    Args:
        title: Program title
        version: Version string
    """
    _print(f"{title} v{version}")


def log_build_complete(build_time: float, unit_count: int, verbose_only: bool = False) -> None:
    """
    Log build completion message.

    Args:
        build_time: Total build time in seconds
        unit_count: Number of units whose action ran
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    noun = "unit" if unit_count == 1 else "units"
    _print(f"Build finished: {unit_count} {noun} in {build_time:.2f}s")


def log_error(message: str) -> None:
    """
    Log an error message to stderr.

    Args:
        message: Error message
    """
    _write(sys.stderr, f"ERROR: {message}")


def log_warning(message: str) -> None:
    """
    Log a warning message.

    Args:
        message: Warning message
    """
    _print(f"WARNING: {message}")


class TimedLogger:
    """
    Context manager for logging with elapsed time tracking.

    Usage:
        with TimedLogger("Loading build script") as timed:
            load()
            timed.detail("12 units registered")
        # Automatically logs completion time
    """

    def __init__(self, operation: str, verbose_only: bool = False):
        """
        Initialize timed logger.

        Args:
            operation: Description of the operation
            verbose_only: If True, only print if verbose mode is enabled
        """
        self.operation = operation
        self.verbose_only = verbose_only
        self.start_time = 0.0

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        log(f"{self.operation}...", self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        del exc_val, exc_tb  # Unused
        elapsed = time.time() - self.start_time
        if exc_type is None:
            log_detail(f"Done ({elapsed:.2f}s)", verbose_only=self.verbose_only)
        return None

    def detail(self, message: str) -> None:
        """Log a detail message within this operation."""
        log_detail(message, verbose_only=self.verbose_only)
