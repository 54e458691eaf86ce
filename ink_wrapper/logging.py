"""
Structured logging setup for the generator.

Configures **structlog** + the stdlib ``logging`` package so that generator
logs (and any stdlib logs from `ink_wrapper_types`) share one renderer. Logs
always go to **stderr**: the generated module is written to stdout and must
stay clean.

Quick start
-----------
    from ink_wrapper.logging import setup_logging, get_logger

    setup_logging(level="DEBUG", log_format="console")
    log = get_logger(__name__)
    log.info("generated", types=3, messages=5)
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Iterable, Optional

import structlog

from .config import get_settings

__all__ = ["setup_logging", "get_logger"]


def _shared_processors() -> Iterable[Any]:
    yield structlog.stdlib.add_log_level
    yield structlog.stdlib.add_logger_name
    yield structlog.processors.TimeStamper(fmt="iso", utc=True)
    yield structlog.processors.StackInfoRenderer()
    yield structlog.processors.UnicodeDecoder()


def setup_logging(
    *,
    level: Optional[str | int] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structlog + stdlib logging. Safe to call more than once; the last
    call wins.

    Parameters
    ----------
    level: str|int
        Log level (e.g. "DEBUG"). Defaults to the configured ``log_level``.
    log_format: str
        "console" or "json". Defaults to the configured ``log_format``.
    """
    settings = get_settings()
    level = level or settings.log_level
    log_format = (log_format or settings.log_format).lower()

    shared = list(_shared_processors())
    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer(sort_keys=True)
        shared.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    # stdlib records (ink_wrapper_types uses plain logging) go through the same renderer
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
