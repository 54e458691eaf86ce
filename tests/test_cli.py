from __future__ import annotations

import ast
import json
import logging

import pytest

from ink_wrapper.cli.main import main
from ink_wrapper.version import __version__


@pytest.fixture(autouse=True)
def _settings(fresh_settings, monkeypatch):
    for var in ("INK_WRAPPER_LOG_LEVEL", "INK_WRAPPER_LOG_FORMAT", "INK_WRAPPER_HEADER_COMMENT"):
        monkeypatch.delenv(var, raising=False)
    yield
    # the CLI points the root handler at the captured stderr of this test
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


def test_generates_to_stdout(metadata_path, capsys):
    assert main(["--metadata", str(metadata_path)]) == 0
    out = capsys.readouterr().out
    ast.parse(out)
    assert "class Instance(ContractInstance):" in out
    assert "def upload" not in out


def test_wasm_path_and_output(metadata_path, tmp_path, capsys):
    target = tmp_path / "bindings.py"
    code = main(["-m", str(metadata_path), "--wasm-path", "contract.wasm", "-o", str(target)])
    assert code == 0
    assert capsys.readouterr().out == ""
    src = target.read_text(encoding="utf-8")
    assert "os.path.dirname(os.path.abspath(__file__)), 'contract.wasm')" in src
    assert "def upload() -> UploadCall:" in src


def test_banner_follows_settings(metadata_path, capsys, monkeypatch):
    monkeypatch.setenv("INK_WRAPPER_HEADER_COMMENT", "false")
    assert main(["--metadata", str(metadata_path)]) == 0
    assert capsys.readouterr().out.startswith('"""Typed bindings')


def test_version(capsys):
    assert main(["version"]) == 0
    assert capsys.readouterr().out.strip() == __version__


def test_metadata_is_required(capsys):
    assert main([]) == 1
    assert "error:" in capsys.readouterr().err


def test_missing_metadata_file(tmp_path, capsys):
    assert main(["--metadata", str(tmp_path / "missing.json")]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_invalid_metadata_writes_nothing(metadata_path, tmp_path, capsys):
    doc = json.loads(metadata_path.read_text(encoding="utf-8"))
    doc["spec"]["messages"][0]["label"] = "a::b::c"
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps(doc), encoding="utf-8")
    target = tmp_path / "out.py"

    assert main(["--metadata", str(bad), "-o", str(target)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Nested modules in method names are unsupported" in captured.err
    assert not target.exists()


def test_debug_logs_go_to_stderr(metadata_path, capsys):
    assert main(["--metadata", str(metadata_path), "--log-level", "debug", "--log-format", "json"]) == 0
    captured = capsys.readouterr()
    ast.parse(captured.out)
    assert "bindings generated" in captured.err
