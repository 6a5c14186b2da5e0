"""Configuration package."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import LoggingSettings, RatesAPISettings, Settings, settings

__all__ = [
    "settings",
    "Settings",
    "RatesAPISettings",
    "LoggingSettings",
    "configure_logging",
    "get_logger",
]
