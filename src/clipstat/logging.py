"""Centralized structlog configuration for the library and the CLI."""

from __future__ import annotations

import logging
import math
import sys
from typing import Any

import numpy as np
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .errors import InvalidArgumentError

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

LOG_FORMATS: tuple[str, ...] = ("console", "json")


def _plain_value(value: Any) -> Any:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def numpy_scalars_to_builtin(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Convert NumPy scalars and NaN in event fields into JSON-friendly values."""
    return {key: _plain_value(value) for key, value in event_dict.items()}


def configure_logging(
    level: str = "warning",
    *,
    json_output: bool = False,
) -> None:
    """Initialize structlog with a consistent processor chain."""

    normalized = level.lower()
    if normalized not in LOG_LEVELS:
        valid = ", ".join(sorted(LOG_LEVELS))
        raise InvalidArgumentError(f"Unsupported log level {level!r}. Choose one of: {valid}.")
    level_value = LOG_LEVELS[normalized]

    logging.basicConfig(level=level_value, format="%(message)s", stream=sys.stderr)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        numpy_scalars_to_builtin,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer: Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = ["LOG_FORMATS", "LOG_LEVELS", "configure_logging", "numpy_scalars_to_builtin"]
