"""Logging for trendwise: console plus rotating file, with API keys masked.

The YouTube Data API takes its key as a ``key=`` query parameter, so request
URLs are never written to a handler unredacted.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

from trendwise.config import Config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that trace outgoing requests at DEBUG
HTTP_LOGGERS = ("httpx", "tweepy")

_SECRET_PARAM = re.compile(r"\b(key|access_key|client_id|api_key|token)=[^&\s'\"]+", re.IGNORECASE)


def redact(message: str) -> str:
    """Mask credential values in ``name=value`` query parameters."""
    return _SECRET_PARAM.sub(r"\1=***", message)


class RedactSecrets(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg, record.args = masked, None
        return True


def setup_logger(
    name: str = "trendwise",
    level: str = "INFO",
    log_file: str | None = None,
    max_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure and return a logger with console and optional file output.

    At DEBUG the same handlers also receive the HTTP client loggers, so each
    scrape and API call shows up next to the pipeline's own lines.
    """
    logger = logging.getLogger(name)
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        ))

    for handler in handlers:
        handler.setFormatter(fmt)
        handler.addFilter(RedactSecrets())
        logger.addHandler(handler)

    if log_level <= logging.DEBUG:
        for http_name in HTTP_LOGGERS:
            http_logger = logging.getLogger(http_name)
            http_logger.setLevel(logging.DEBUG)
            for handler in handlers:
                http_logger.addHandler(handler)

    return logger


def setup_logger_from_config(config: Config, name: str = "trendwise") -> logging.Logger:
    """Configure the logger from the ``logging`` config section."""
    log_file = config.log_file
    return setup_logger(
        name=name,
        level=config.get("logging.level", default="INFO"),
        log_file=str(log_file) if log_file else None,
        max_size_mb=config.get("logging.max_size_mb", default=10),
        backup_count=config.get("logging.backup_count", default=5),
    )


def get_logger(name: str = "trendwise") -> logging.Logger:
    """Get an existing logger by name."""
    return logging.getLogger(name)
