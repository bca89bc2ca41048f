"""Structured logging configuration for the Hanzi Battle engine.

The engine modules only ever call ``get_logger(__name__)`` and log
key/value events. Whoever embeds the engine calls ``configure_logging``
once at startup; without it structlog's default console output is used.

Example:
    >>> from hanzi_battle.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Character leveled up", glyph="你", level=3)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from hanzi_battle.core.config import Settings


def app_context_processor(app_name: str, app_version: str) -> Processor:
    """Build a processor stamping every entry with the application identity."""

    def add_app_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", app_version)
        return event_dict

    return add_app_context


def configure_logging(
    settings: Settings | None = None,
    *,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure application-wide logging from settings.

    Args:
        settings: Settings providing the level and app identity. Defaults
            to ``get_settings()``.
        json_format: Force JSON (True) or console (False) output. Defaults
            to console output in debug mode and JSON otherwise.
        log_file: Optional path to a log file for persistent logging.

    Example:
        >>> configure_logging(Settings(debug=True, log_level="DEBUG"))
    """
    if settings is None:
        from hanzi_battle.core.config import get_settings

        settings = get_settings()

    level = getattr(logging, settings.log_level, logging.INFO)
    if json_format is None:
        json_format = settings.is_production

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context_processor(settings.app_name, settings.app_version),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        # Keep hanzi readable in log files
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=settings.debug,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=level,
        stream=sys.stdout,
        force=True,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in every subsequent log entry.

    Example:
        >>> bind_context(player="p1")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind context variables for the duration of a block only.

    Example:
        >>> with log_context(save_slot="autosave"):
        ...     logger.info("Game saved")
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


__all__ = [
    "app_context_processor",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
]
