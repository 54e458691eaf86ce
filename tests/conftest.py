"""
Shared pytest fixtures:
- The ``test_contract`` metadata document (dict and parsed model)
- Generated bindings for it, written to a temporary directory and loaded as a module
- A fresh settings cache (for tests that change the environment)
"""
from __future__ import annotations

import copy
import json
import sys
import types
import typing as t
from pathlib import Path

import pytest

from ink_wrapper.codegen import generate
from ink_wrapper.config import get_settings
from ink_wrapper.metadata import parse_metadata
from ink_wrapper.model import ContractMetadata

FIXTURES = Path(__file__).resolve().parent / "fixtures"
METADATA_PATH = FIXTURES / "test_contract.json"


def load_generated(src: str, name: str, path: Path) -> types.ModuleType:
    """Write generated source to ``path`` and execute it as module ``name`` (registered in sys.modules)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(src, encoding="utf-8")
    module = types.ModuleType(name)
    module.__file__ = str(path)
    sys.modules[name] = module
    exec(compile(src, str(path), "exec"), module.__dict__)
    return module


@pytest.fixture
def fresh_settings() -> t.Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def metadata_path() -> Path:
    return METADATA_PATH


@pytest.fixture
def metadata_doc() -> t.Dict[str, t.Any]:
    """A deep copy of the raw document; tests may mutate it freely."""
    with METADATA_PATH.open("r", encoding="utf-8") as f:
        return copy.deepcopy(json.load(f))


@pytest.fixture
def metadata(metadata_doc: t.Dict[str, t.Any]) -> ContractMetadata:
    return parse_metadata(metadata_doc)


@pytest.fixture
def generated_src(metadata: ContractMetadata) -> str:
    return generate(metadata, wasm_path="test_contract.wasm")


@pytest.fixture
def bindings_dir(tmp_path: Path) -> Path:
    """Directory the generated module is written to; its wasm path resolves here."""
    return tmp_path / "bindings"


@pytest.fixture
def contract(generated_src: str, bindings_dir: Path) -> t.Iterator[types.ModuleType]:
    name = "generated_test_contract"
    yield load_generated(generated_src, name, bindings_dir / "test_contract.py")
    sys.modules.pop(name, None)
