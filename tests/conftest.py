"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
makes the class file builder importable from every test directory.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

_tests_dir = Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))

# Force reimport of linkcheck modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("linkcheck"):
        del sys.modules[module_name]

from classfile_builder import ClassBuilder  # noqa: E402


@pytest.fixture
def write_class(tmp_path: Path) -> Callable[[ClassBuilder], Path]:
    """Write a built class to ``<tmp>/classes/<internal name>.class``."""

    def _write(builder: ClassBuilder, root: Path | None = None) -> Path:
        base = root or (tmp_path / "classes")
        target = base / f"{builder.name}.class"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(builder.build())
        return target

    return _write
