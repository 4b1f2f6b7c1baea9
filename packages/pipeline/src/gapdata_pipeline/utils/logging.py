"""
utils/logging.py — structlog setup for the gapdata CLI and library callers.

structlog events are handed to the stdlib root logger and rendered by a
single stderr handler, either as console lines or one JSON object per
line (settings.log_format). stdout is left to the CLI. Stdlib records
from other libraries get the same timestamp/level/logger fields.

Usage:
    from gapdata_pipeline.utils.logging import configure_logging, get_logger

    configure_logging("DEBUG", "json")
    log = get_logger(__name__, metric="income")
    log.info("reshaped", rows=780)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from gapdata_shared.config import settings

_HANDLER_NAME = "gapdata"

# Fields added to every event, structlog or stdlib
_PRE_CHAIN: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
]


def _render_chain(fmt: str) -> list[Any]:
    if fmt == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    # ConsoleRenderer formats exceptions itself
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Install the gapdata stderr handler and configure structlog.

    Calling it again replaces the handler rather than adding a second one.

    Args:
        log_level:  Overrides settings.log_level.
        log_format: Overrides settings.log_format ("console" | "json").
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    fmt = log_format or settings.log_format

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(fmt),
            ],
        )
    )

    root = logging.getLogger()
    for old in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level)

    structlog.configure(
        processors=[
            *_PRE_CHAIN,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """structlog logger for `name`, pre-bound with initial_values."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger  # type: ignore[return-value]
