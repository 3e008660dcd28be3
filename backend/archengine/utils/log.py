"""
Logging setup.

Every module grabs its own logger with ``structlog.get_logger(__name__)``
and logs snake_case events with key/value context. ``configure_logging``
is called once by whoever embeds the engine; the defaults below apply
when it never is.
"""

import logging

import structlog

from archengine import config


def configure_logging(level: str = None, fmt: str = None) -> None:
    """Configure structlog for console or JSON output."""
    level_name = (level or config.LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer = (
        structlog.processors.JSONRenderer()
        if (fmt or config.LOG_FORMAT) == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
    )
