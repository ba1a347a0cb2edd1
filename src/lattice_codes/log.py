"""
Structured Logging
==================

All logging goes through structlog, rendered by the stdlib logging
machinery onto stderr. stdout is reserved for results (solutions, bounds,
discharging diagnostics).

Modules obtain a logger with:

    logger = get_logger("lattice_codes.<layer>.<module>")

and log snake_case events with key-value context.

LIBRARY USE:
    get_logger wraps a stdlib logger instead of structlog's default
    PrintLogger, so a program that imports lattice_codes without calling
    setup_logging never gets log lines on stdout. Its events follow the
    stdlib defaults: dropped below WARNING, otherwise written to stderr
    by logging.lastResort or the handlers the program installs.
"""

import logging
import sys
from typing import Any, List

import structlog

from .spec.constants import DEFAULT_LOG_LEVEL, LOG_FORMATS


def get_logger(name: str) -> Any:
    """structlog logger emitting through the stdlib logger `name`."""
    return structlog.wrap_logger(logging.getLogger(name))


def setup_logging(level: str = DEFAULT_LOG_LEVEL, fmt: str = "console") -> None:
    """
    Configure structlog + stdlib logging for the whole process.

    Args:
        level: stdlib level name (debug, info, warning, error)
        fmt: "console" (human readable) or "json" (one object per line)
    """
    if fmt not in LOG_FORMATS:
        raise ValueError(f"log format must be one of {LOG_FORMATS}, got {fmt!r}")

    shared_processors: List[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # bound at call time so a replaced sys.stderr (pytest capture) is honoured
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
