"""
Nox sessions for ink-wrapper.

Sessions:
  - lint   : ruff + black + mypy over the packages
  - unit   : the pytest suite
  - regen  : regenerate bindings for the test fixture and byte-compile them

Pass extra args to pytest like:
  nox -s unit -- -k "codegen" -vv
"""

from __future__ import annotations

from pathlib import Path

import nox

nox.options.reuse_venv = True
nox.options.stop_on_first_error = False

REPO_ROOT = Path(__file__).resolve().parent
PY_PATHS = ["ink_wrapper", "ink_wrapper_types", "tests", "noxfile.py"]

TEST_PYTHONS = ["3.10", "3.11", "3.12"]


@nox.session(name="lint", python="3.11")
def lint(session: nox.Session) -> None:
    """Static analysis: ruff, black (check), mypy."""
    session.install("-e", f"{REPO_ROOT}[dev]")
    session.run("ruff", "check", *PY_PATHS)
    session.run("black", "--check", *PY_PATHS)
    session.run(
        "mypy",
        "--pretty",
        "--show-error-codes",
        "--ignore-missing-imports",
        "ink_wrapper",
        "ink_wrapper_types",
    )


@nox.session(name="unit", python=TEST_PYTHONS)
def unit(session: nox.Session) -> None:
    """Run the test suite."""
    session.env.setdefault("PYTHONUNBUFFERED", "1")
    session.install("-e", f"{REPO_ROOT}[test]")
    session.run("pytest", *session.posargs)


@nox.session(name="regen", python="3.11")
def regen(session: nox.Session) -> None:
    """Generate bindings for the test fixture and check they compile."""
    session.install("-e", str(REPO_ROOT))
    out = Path(session.create_tmp()) / "test_contract.py"
    session.run(
        "ink-wrapper",
        "--metadata",
        str(REPO_ROOT / "tests" / "fixtures" / "test_contract.json"),
        "--wasm-path",
        "test_contract.wasm",
        "--output",
        str(out),
    )
    session.run("python", "-m", "py_compile", str(out))
