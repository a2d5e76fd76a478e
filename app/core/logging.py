"""
Logging setup - structlog configured once at application start.

Handlers log events by name with keyword context:
    logger.info("user.role_updated", user_id=..., name=...)
"""

import logging

import structlog

from app.core.config import get_settings


def configure_logging() -> None:
    """Configure structlog (console output in dev, JSON when log_json is set)."""
    settings = get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.log_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
