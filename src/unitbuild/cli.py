"""
Command-line interface for unitbuild.

Loads the build script of a project, then runs the requested units (or the
default units when none are given).

Examples:
    unitbuild                      # Run default units of ./build.py
    unitbuild clean app            # Run 'clean', then 'app'
    unitbuild -C ~/src/proj app    # Use another build root
    unitbuild --list               # Show registered units
    unitbuild --dry-run            # Show what would run
"""

import argparse
import sys
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.table import Table

from unitbuild import __version__, output
from unitbuild.config import BuildOptions
from unitbuild.errors import BuildScriptError, CyclicDependencyError, UnitFailedError, UnknownUnitError
from unitbuild.fs import chdir
from unitbuild.orchestrator import BuildOrchestrator
from unitbuild.registry import UnitRegistry
from unitbuild.script import DEFAULT_SCRIPT_NAME, load_build_script

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


@dataclass
class BuildArgs:
    """Parsed command-line arguments."""

    root: Path
    script: Optional[Path] = None
    output_dir: Optional[str] = None
    units: list[str] = field(default_factory=list)
    list_units: bool = False
    dry_run: bool = False
    verbose: bool = False

    @property
    def script_path(self) -> Path:
        if self.script is None:
            return self.root / DEFAULT_SCRIPT_NAME
        return self.script if self.script.is_absolute() else self.root / self.script


def make_options(args: BuildArgs) -> BuildOptions:
    """Combine command-line arguments with environment defaults."""
    options = BuildOptions.from_env(args.root)
    if args.output_dir is not None:
        options.output_dir = args.output_dir
    options.verbose = options.verbose or args.verbose
    options.units = list(args.units)
    return options


def print_units(registry: UnitRegistry, console: Console) -> None:
    """Print all registered units as a table."""
    table = Table(title="Units", title_justify="left")
    table.add_column("Unit")
    table.add_column("Default", justify="center")
    table.add_column("Depends on")
    for unit in registry:
        deps = ", ".join(dep.name for dep in unit.dependencies)
        table.add_row(unit.name, "yes" if unit.is_default else "", deps or "-")
    console.print(table)


def print_plan(orchestrator: BuildOrchestrator, units: list[str], console: Console) -> None:
    """Print the units a build would run, in order."""
    plan = orchestrator.plan(units)
    if not plan:
        console.print("Nothing to run.")
        return
    for index, unit in enumerate(plan, start=1):
        console.print(f"{index:>3}. {unit.name}")


def build_command(args: BuildArgs, console: Optional[Console] = None) -> int:
    """Load the build script and run (or list, or plan) its units.

    Returns:
        Process exit code.
    """
    options = make_options(args)
    output.set_verbose(options.verbose)
    registry = UnitRegistry()

    def load() -> None:
        load_build_script(args.script_path, registry, options)
        output.log(f"Loaded {len(registry)} units from {args.script_path}", verbose_only=True)

    exit_code = _guarded(load, options.verbose)
    if exit_code != EXIT_OK:
        return exit_code
    return execute(registry, args, options, console)


def execute(
    registry: UnitRegistry,
    args: BuildArgs,
    options: BuildOptions,
    console: Optional[Console] = None,
) -> int:
    """Run, list or plan the units of a populated registry.

    Returns:
        Process exit code.
    """
    console = console if console is not None else Console(highlight=False)
    orchestrator = BuildOrchestrator(registry, verbose=options.verbose)

    if not (args.list_units or args.dry_run):
        try:
            chdir(options.root)
        except OSError as e:
            output.log_error(f"cannot enter build root {options.root}: {e.strerror or e}")
            return EXIT_FAILURE

    def run() -> None:
        if args.list_units:
            print_units(registry, console)
        elif args.dry_run:
            print_plan(orchestrator, options.units, console)
        else:
            orchestrator.build(options.units)

    return _guarded(run, options.verbose)


def _guarded(func: Callable[[], None], verbose: bool) -> int:
    """Call func and translate build errors into an exit code and one diagnostic line."""
    try:
        func()
        return EXIT_OK

    except UnknownUnitError as e:
        output.log_error(str(e))
        return EXIT_FAILURE

    except UnitFailedError as e:
        output.log_error(str(e))
        if verbose:
            print("".join(traceback.format_exception(type(e.cause), e.cause, e.cause.__traceback__)), file=sys.stderr)
        return EXIT_FAILURE

    except (BuildScriptError, CyclicDependencyError) as e:
        output.log_error(str(e))
        return EXIT_FAILURE

    except KeyboardInterrupt:
        output.log_error("Build interrupted")
        return EXIT_INTERRUPTED


def run_registry(registry: UnitRegistry, argv: Optional[list[str]] = None) -> int:
    """Run units of an already populated registry, driven by command-line arguments.

    For build scripts that run themselves instead of going through the
    unitbuild command:

        if __name__ == "__main__":
            sys.exit(run_registry(registry))

    Returns:
        Process exit code.
    """
    args = parse_args(argv)
    output.init_timer()
    options = make_options(args)
    output.set_verbose(options.verbose)
    return execute(registry, args, options)


def parse_args(argv: Optional[list[str]] = None) -> BuildArgs:
    parser = argparse.ArgumentParser(
        prog="unitbuild",
        description="Run build units declared in a Python build script",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"unitbuild {__version__}",
    )
    parser.add_argument(
        "units",
        nargs="*",
        help="Units to run (default: all units marked as default)",
    )
    parser.add_argument(
        "-C",
        dest="root",
        type=Path,
        default=Path.cwd(),
        help="Build root directory (default: current directory)",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="script",
        type=Path,
        default=None,
        help=f"Build script, relative to the build root (default: {DEFAULT_SCRIPT_NAME})",
    )
    parser.add_argument(
        "--out",
        dest="output_dir",
        default=None,
        help="Output directory, relative to the build root (default: $UNITBUILD_OUT_DIR or bin)",
    )
    parser.add_argument(
        "-l",
        "--list",
        dest="list_units",
        action="store_true",
        help="List registered units and exit",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Print the units that would run, in order, without running them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    ns = parser.parse_args(argv)
    return BuildArgs(
        root=ns.root.resolve(),
        script=ns.script,
        output_dir=ns.output_dir,
        units=ns.units,
        list_units=ns.list_units,
        dry_run=ns.dry_run,
        verbose=ns.verbose,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """unitbuild - run named build units in dependency order."""
    args = parse_args(argv)
    output.init_timer()
    if args.verbose:
        output.log_header("unitbuild", __version__)
    return build_command(args)


if __name__ == "__main__":
    sys.exit(main())
