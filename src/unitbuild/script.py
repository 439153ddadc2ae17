"""Loading of build scripts.

A build script is a plain Python file (by default `build.py` in the build
root) that defines:

    def register(registry, options):
        ...

The function receives a fresh UnitRegistry and the BuildOptions of the
current invocation and declares units and their dependencies on it.
"""

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from .config import BuildOptions
from .errors import BuildScriptError
from .registry import UnitRegistry

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_NAME = "build.py"
REGISTER_FUNCTION = "register"


def load_module(path: Path) -> ModuleType:
    """Import the build script at path as a standalone module.

    Raises:
        BuildScriptError: If the file is missing or raises while importing.
    """
    if not path.is_file():
        raise BuildScriptError(path, "build script not found")

    spec = importlib.util.spec_from_file_location(f"_unitbuild_script_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise BuildScriptError(path, "cannot be imported as a Python module")

    module = importlib.util.module_from_spec(spec)
    # Dataclasses and pickling look the module up by name while it executes.
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except KeyboardInterrupt:
        sys.modules.pop(spec.name, None)
        raise
    except Exception as e:
        sys.modules.pop(spec.name, None)
        raise BuildScriptError(path, f"{type(e).__name__}: {e}") from e
    return module


def load_build_script(path: Path, registry: UnitRegistry, options: BuildOptions) -> ModuleType:
    """Import a build script and let it register its units on registry.

    Returns:
        The imported module.

    Raises:
        BuildScriptError: If the script is missing, fails to import, has no
            register() function or register() raises.
    """
    module = load_module(path)
    register = getattr(module, REGISTER_FUNCTION, None)
    if not callable(register):
        raise BuildScriptError(path, f"no {REGISTER_FUNCTION}(registry, options) function defined")

    try:
        register(registry, options)
    except KeyboardInterrupt:
        raise
    except BuildScriptError:
        raise
    except Exception as e:
        raise BuildScriptError(path, f"{REGISTER_FUNCTION}() failed: {type(e).__name__}: {e}") from e

    logger.debug("Loaded %s: %d units", path, len(registry))
    return module
