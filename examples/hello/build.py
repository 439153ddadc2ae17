"""Example build script.

Run from this directory with `unitbuild` (default units), `unitbuild clean`
or `unitbuild --list`. It can also run itself: `python build.py clean`.
"""

import sys

from unitbuild import fs, toolchain
from unitbuild.cli import run_registry
from unitbuild.config import BuildOptions
from unitbuild.registry import UnitRegistry


def register(registry: UnitRegistry, options: BuildOptions) -> None:
    out = options.output_dir

    # 'assets' and 'hello' run by default, 'hello' after 'assets'.
    @registry.unit(default=True)
    def assets() -> None:
        fs.mkdir_all(out)
        fs.copy_dir(out, "assets")

    @registry.unit(default=True, depends=["assets"])
    def hello() -> None:
        exe = "hello.exe" if options.resolve_target().os == "windows" else "hello"
        toolchain.go_build("hello", "-o", fs.join("..", out, exe))

    # Only runs when asked for explicitly.
    @registry.unit()
    def clean() -> None:
        fs.delete_dirs(out)
        toolchain.go_clean(".", "./...")


if __name__ == "__main__":
    registry = UnitRegistry()
    register(registry, BuildOptions.from_env())
    sys.exit(run_registry(registry))
