"""
Logging configuration.

Every module obtains its logger through ``get_logger(__name__)`` so that a
single ``init_logging`` call at process start configures API, worker and
client output alike.
"""

import logging
import logging.config
from typing import Any

_DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def init_logging(level: str = "INFO", fmt: str = _DEFAULT_FORMAT) -> None:
    """
    Configure root logging for the process.

    Args:
        level: Root log level name.
        fmt: Log record format string.
    """
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": fmt}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "root": {"level": level.upper(), "handlers": ["console"]},
        "loggers": {
            # SQL echo is controlled by the engine, not by the root level
            "sqlalchemy.engine": {"level": "WARNING"},
            "httpx": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    return logging.getLogger(name)
