"""Central logging configuration used across modules."""

from __future__ import annotations

import logging

LOGGER_NAME = "deribit_connector"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# requests logs every connection through urllib3; only show it when debugging.
NOISY_LOGGERS = ("urllib3",)


def get_logger(area: str) -> logging.Logger:
    """Return the child logger for one component, e.g. ``session``."""
    return logging.getLogger(f"{LOGGER_NAME}.{area}")


def setup_logger(log_level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure and return the package logger.

    Logs are written to console, plus an optional file if `log_file` is set.
    Child loggers from ``get_logger`` propagate here. Calling again only
    changes the level; handlers are attached once.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
