"""
Structured logging setup using structlog.
Log output goes to stderr so stdout stays free for progress lines.
"""

import logging
import sys
from typing import Optional

import structlog

from flick2influx.config import settings


def _stderr_logger(*args) -> structlog.PrintLogger:
    # sys.stderr is looked up per call so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog for the process.
    
    Args:
        level: Logging level name, defaults to settings.log_level
        log_format: "json" or "text", defaults to settings.log_format
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if (log_format or settings.log_format).lower() == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    """Get a structlog logger for a module. The name is passed to the logger factory."""
    return structlog.get_logger(name)
