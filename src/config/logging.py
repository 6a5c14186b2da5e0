"""Structured logging configuration using structlog."""
import logging
import sys
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from src.config.settings import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP transport libraries log every request at INFO
QUIET_LOGGERS = ("httpcore", "httpx")


def add_unit_type_prefix(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Prefix the event with ``[unit_type_id]`` when the line carries one.

    Lookups for several unit types run concurrently and their lines interleave.
    Zero is a valid id, so only a missing id skips the prefix.
    """
    unit_type_id = event_dict.get("unit_type_id")
    if unit_type_id is not None:
        event_dict["event"] = f"[{unit_type_id}] {event_dict.get('event', '')}"
    return event_dict


def _build_handler(log_format: str, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handler.setLevel(level)
    return handler


def build_processors(log_format: str) -> list[Any]:
    """Return the structlog processor chain, ending in the renderer for log_format."""
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_unit_type_prefix,
        renderer,
    ]


def configure_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Configure stdlib logging and structlog for the service.

    Args:
        level: Log level name; defaults to LOG_LEVEL
        log_format: "json" or "console"; defaults to LOG_FORMAT
    """
    level_name = level or settings.logging.level
    log_format = log_format or settings.logging.format
    log_level = getattr(logging, level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(log_format, log_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)
