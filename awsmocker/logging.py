"""Logging utilities for awsmocker commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "awsmocker"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the awsmocker hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def parse_log_level(value: str | None) -> int | None:
    """Translate a ``debug|info|warn|error`` flag value into a logging level.

    Returns ``None`` when the value is not recognised.
    """
    if value is None:
        return logging.INFO
    return _LEVELS.get(value.strip().lower())


def configure_logging(
    *, level: int | str = logging.INFO, log_file: Path | None = None
) -> logging.Logger:
    """Configure the awsmocker logger with stderr output and an optional file sink."""
    unparsed: str | None = None
    if isinstance(level, str):
        parsed = parse_log_level(level)
        if parsed is None:
            unparsed = level
            parsed = logging.INFO
        level = parsed

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[awsmocker] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    if unparsed is not None:
        logger.warning("Unable to parse log level %r, defaulting to 'info'", unparsed)

    return logger


__all__ = ["configure_logging", "get_logger", "parse_log_level"]
