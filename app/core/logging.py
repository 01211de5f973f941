"""
Centralised logging configuration.

Call :func:`configure_logging` once at start-up; modules then use
``logging.getLogger(__name__)``.
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Apply a console-only logging configuration at *level*."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "app": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            # SQL echo is driven by settings.DEBUG on the engine
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })
