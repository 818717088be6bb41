"""structlog setup for the CLI. Log lines go to stderr; stdout carries command output only."""
from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

from chatwoot_cli.config.redact import redact_settings_dict

LOG_FORMATS = ("human", "json")

# httpx logs every request at INFO, including the full URL.
_QUIET_LOGGERS = ("httpx", "httpcore")


def redact_event(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    return redact_settings_dict(event_dict)


def _level_number(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    # Unknown names are reported by config validation.
    return level if isinstance(level, int) else logging.WARNING


def _renderer(log_format: str | None, json_logs: bool) -> Any:
    chosen = (log_format or "").strip().lower()
    if chosen not in LOG_FORMATS:
        chosen = "json" if json_logs else "human"
    if chosen == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    log_level: str | None = None,
    *,
    json_logs: bool = False,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    Send structlog and stdlib records through a single handler.

    Called without a level before settings exist, LOG_LEVEL and LOG_FORMAT come straight from
    the environment. Once settings are loaded the CLI passes the resolved values in.
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL") or "WARNING"
    if log_format is None:
        log_format = os.environ.get("LOG_FORMAT")

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_event,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(processor=_renderer(log_format, json_logs), foreign_pre_chain=pre_chain)
    )
    logging.basicConfig(level=_level_number(log_level), handlers=[handler], force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
