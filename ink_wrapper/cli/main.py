"""
ink_wrapper.cli.main
====================

`ink-wrapper`: generate a typed Python module from ink! contract metadata.

Examples
--------
    $ ink-wrapper --metadata flipper.json > flipper.py
    $ ink-wrapper -m flipper.json --wasm-path flipper.wasm -o flipper.py
    $ INK_WRAPPER_LOG_LEVEL=DEBUG ink-wrapper -m flipper.json > /dev/null
    $ ink-wrapper version

The generated source goes to stdout unless ``--output`` is given; logs and
errors always go to stderr. Nothing is written when the metadata is rejected.

Configuration
-------------
- Log level   : `--log-level` or env `INK_WRAPPER_LOG_LEVEL` (default: WARNING)
- Log format  : `--log-format` or env `INK_WRAPPER_LOG_FORMAT` (console | json)
- Banner      : env `INK_WRAPPER_HEADER_COMMENT` (default: true)
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from ..codegen import generate
from ..config import get_settings
from ..logging import get_logger, setup_logging
from ..metadata import load_metadata
from ..version import __version__

app = typer.Typer(
    name="ink-wrapper",
    help="Generate typed Python bindings for an ink! smart contract.",
    add_completion=False,
)

__all__ = ["app", "main", "run"]

log = get_logger(__name__)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    metadata: Optional[Path] = typer.Option(
        None,
        "--metadata",
        "-m",
        help="Contract metadata JSON produced by cargo-contract.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    wasm_path: Optional[str] = typer.Option(
        None,
        "--wasm-path",
        help="Path of the contract's .wasm, relative to the generated file; adds an upload() helper.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the module here instead of stdout.",
        dir_okay=False,
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR.",
    ),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help='"console" or "json".',
    ),
) -> None:
    """
    Read the metadata, generate the bindings module and write it out.
    """
    setup_logging(level=log_level.upper() if log_level else None, log_format=log_format)
    if ctx.invoked_subcommand is not None:
        return
    if metadata is None:
        raise typer.BadParameter("--metadata is required", param_hint="'--metadata'")

    settings = get_settings()
    log.debug("loading metadata", path=str(metadata))
    contract = load_metadata(metadata)
    src = generate(contract, wasm_path=wasm_path, header_comment=settings.header_comment)

    if output is None:
        typer.echo(src, nl=False)
    else:
        output.write_text(src, encoding="utf-8")
        log.info("bindings written", path=str(output), size=len(src))


@app.command("version")
def version() -> None:
    """Print the ink-wrapper version."""
    typer.echo(__version__)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="ink-wrapper", standalone_mode=False, args=argv)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Console-script entry point: exit with the status of `main`."""
    sys.exit(main(argv))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
