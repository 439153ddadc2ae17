"""Static checks that library code reports through logging or unitbuild.output.

Only the CLI may print directly; everything else goes through
logging.getLogger(__name__) for debug detail or unitbuild.output for
user-facing progress.
"""

import re
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).parent.parent.parent / "src" / "unitbuild"


def _source_files() -> list[Path]:
    return [p for p in SRC_DIR.rglob("*.py") if "__pycache__" not in p.parts]


class TestLoggingCompliance:
    def test_source_tree_found(self):
        assert SRC_DIR.exists(), f"Source directory not found: {SRC_DIR}"
        assert _source_files(), "No Python files found in src/unitbuild"

    def test_no_print_outside_cli(self):
        """print() is reserved for the CLI."""
        violations = []
        for file_path in _source_files():
            if file_path.name in ("cli.py", "__main__.py"):
                continue
            for line_num, line in enumerate(file_path.read_text(encoding="utf-8").splitlines(), start=1):
                stripped = line.strip()
                if stripped.startswith("#"):
                    continue
                if re.match(r"print\s*\(", stripped):
                    violations.append(f"{file_path}:{line_num}: {stripped}")

        if violations:
            pytest.fail("print() found in library code:\n" + "\n".join(violations))

    def test_modules_use_module_logger(self):
        """Modules that log use a module-level logger, not the root logger."""
        violations = []
        for file_path in _source_files():
            content = file_path.read_text(encoding="utf-8")
            if re.search(r"\blogging\.(debug|info|warning|error)\(", content):
                violations.append(str(file_path))
            if re.search(r"\blogger\.\w+\(", content) and "logger = logging.getLogger(__name__)" not in content:
                violations.append(str(file_path))

        assert violations == []
