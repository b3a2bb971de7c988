"""Structured logging configuration.

Every module logs through structlog with a stable JSON line format so the
ingest and snapshot jobs can be grepped the same way.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog once for the process.

    Args:
        verbose: Emit debug events as well as info and above.
    """
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger.
    """
    return structlog.get_logger(name)
