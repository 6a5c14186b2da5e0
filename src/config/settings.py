"""Application settings and configuration management."""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class RatesAPISettings(BaseSettings):
    """Third-party rates provider configuration."""

    url: str = "https://dev.gondwana-collection.com/Web-Store/Rates/Rates.php"
    # Unit types queried when the request does not select one
    default_unit_type_ids: list[int] = [-2147483637, -2147483456]

    # Retry policy: attempts = max_retries + 1
    max_retries: int = 2
    retry_delay: float = 0.5  # Seconds between attempts
    base_timeout: float = 30.0  # Timeout of the first attempt, in seconds
    timeout_step: float = 15.0  # Added to the timeout on each further attempt

    # Covers every attempt of every unit type in one request
    request_deadline: float = 150.0

    model_config = SettingsConfigDict(env_prefix="RATES_API_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False  # Attach the raw provider response to each rate quote
    api_version: str = "1.0.0"

    # Sub-settings
    rates_api: RatesAPISettings = RatesAPISettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
