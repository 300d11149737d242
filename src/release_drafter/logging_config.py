"""Structured logging for the release drafter.

Every pipeline step logs an event name plus the repository, tag and
step it concerns, so a failed webhook delivery can be diagnosed from
the log alone:

  {"event": "release_draft_failed", "owner": "myorg", "repo": "api",
   "tag": "v1.2.0", "state": "fetching_range", "error": "..."}

Usage:
    from release_drafter.logging_config import setup_logging, get_logger

    setup_logging(environment="production")
    logger = get_logger(__name__)
    logger.info("release_published", owner="myorg", repo="api", tag="v1.2.0")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def setup_logging(
    environment: str | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Development renders colorized console lines; production renders one
    JSON object per line.

    Args:
        environment: "development" or "production". Reads ENVIRONMENT
                     if not provided.
        log_level: DEBUG, INFO, WARNING or ERROR. Reads LOG_LEVEL if not
                   provided.
    """
    env = environment or os.environ.get("ENVIRONMENT", "development")
    level = getattr(logging, (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper())

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if env == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # httpx and uvicorn log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)


def get_logger(name: str) -> Any:
    """Return a structlog bound logger for the given module name."""
    return structlog.get_logger(name)
