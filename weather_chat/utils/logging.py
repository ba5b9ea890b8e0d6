"""Logging configuration."""

import logging
import sys

from pydantic import BaseModel, field_validator

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Upstream clients log every request at INFO
QUIET_LOGGERS = ("anthropic", "httpx", "httpcore", "uvicorn.access")


class LogConfig(BaseModel):
    """Logging configuration, built from Settings at startup."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    quiet_loggers: tuple[str, ...] = QUIET_LOGGERS

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LEVELS:
            raise ValueError(f"unknown log level {value!r}; expected one of {', '.join(LEVELS)}")
        return level


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger for the service.

    Module loggers inherit this level; the listed upstream loggers are held at WARNING.
    """
    if config is None:
        config = LogConfig()

    logging.basicConfig(
        level=config.level,
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)
        level: Explicit level; without one the logger follows setup_logging

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(level.upper())
    return logger
