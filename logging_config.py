"""Logging configuration for console output from Eye2Gene and uvicorn."""

from __future__ import annotations

import logging
from logging.config import dictConfig

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str, verbose: bool = False) -> None:
    log_level = level.upper()
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if verbose:
        fmt = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": fmt}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {"level": log_level, "handlers": ["stdout"]},
        }
    )
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(log_level)
