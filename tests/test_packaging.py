from __future__ import annotations

from importlib import import_module
from pathlib import Path

# ink_wrapper.cli re-exports the main() function, which shadows the submodule attribute.
cli_main = import_module("ink_wrapper.cli.main")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_console_script_targets_cli():
    text = PYPROJECT.read_text(encoding="utf-8")
    assert 'ink-wrapper = "ink_wrapper.cli.main:run"' in text
    assert callable(cli_main.run)


def test_design_notes_are_not_the_package_readme():
    assert 'readme = "DESIGN.md"' not in PYPROJECT.read_text(encoding="utf-8")
