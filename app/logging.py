from __future__ import annotations

import logging
from typing import Any

import structlog

from app.core.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog for JSON structured logging.

    - JSON lines with ISO/UTC timestamp, level, event, and bound fields
    - Includes contextvars so request_id and others flow automatically
    - Formats exception info in JSON if exc_info is attached
    - stdlib/uvicorn records go through the same formatter
    """
    settings = settings or get_settings()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.resolved_log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )


def get_logger(*args: Any, **kwargs: Any) -> structlog.stdlib.BoundLogger:  # convenience
    return structlog.get_logger(*args, **kwargs)
