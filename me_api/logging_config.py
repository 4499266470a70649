"""Logging setup for the API process.

Records from ``logging.getLogger(__name__)`` call sites are rendered through
structlog's stdlib integration, either as JSON lines (default) or as a
console format for local development.
"""
from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

from .config import LoggingSettings, settings

_configured = False
_installed: list[logging.Handler] = []


def shared_processors() -> list[Processor]:
    """Processors applied to every record before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def build_formatter(config: LoggingSettings) -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering stdlib records with the configured renderer."""
    if config.format == "json":
        processors: list[Processor] = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors(),
        processors=processors,
    )


def setup_logging(config: LoggingSettings | None = None, *, force: bool = False) -> None:
    """Configure root logging handlers and structlog.

    Safe to call more than once; later calls are ignored unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    config = config or settings.logging
    formatter = build_formatter(config)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
    _installed.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    structlog.configure(
        processors=shared_processors() + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
