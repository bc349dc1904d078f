"""Structured logging for the charsheet rules core.

Rules mutations log through structlog as key-value events: "Resource
used", "Rest taken", "Condition applied", "Dice rolled". A host wraps the
edits of one character in ``character_context`` so every event they
trigger carries that character's id.

Example:
    >>> configure_logging(level="DEBUG")
    >>> with character_context("c-42"):
    ...     get_logger(__name__).info("Resource used", resource="Rage", remaining=2)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from charsheet.core.config import Settings


APP_NAME = "charsheet"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag an entry with the application unless the caller already did."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def configure_logging(*, level: str = "INFO", json_format: bool = False) -> None:
    """Print rules events to stdout at or above a level.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: One JSON object per line instead of console output.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
    ]
    if json_format:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
    )


def configure_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``log_level`` and ``json_logs``.

    Args:
        settings: Application settings; the cached singleton if omitted.
    """
    if settings is None:
        from charsheet.core.config import get_settings

        settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def character_context(character_id: str, **context: Any) -> Iterator[None]:
    """Bind a character id (and any extra fields) to events inside the block.

    Bindings are restored on exit, so contexts nest.
    """
    with structlog.contextvars.bound_contextvars(character_id=character_id, **context):
        yield


__all__ = [
    "APP_NAME",
    "add_app_context",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "character_context",
]
