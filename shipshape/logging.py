"""Logging setup shared by the discovery modules and the CLI.

Every module logs through a child of the ``shipshape`` logger. The CLI calls
:func:`configure_logging` once per invocation to attach a stderr handler and,
when ``--log-file`` is given, a timestamped file handler.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "shipshape"
CONSOLE_FORMAT = "[shipshape] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``shipshape`` or its ``shipshape.<name>`` child."""
    if not name:
        return logging.getLogger(PACKAGE_LOGGER)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI verbosity flags to a logging level. ``quiet`` wins."""
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Point the package logger at stderr, plus ``log_file`` when given.

    Calling this again replaces the handlers from the previous call.
    """
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = get_logger()
    _drop_handlers(logger)
    logger.setLevel(level)
    logger.propagate = False

    logger.addHandler(_console_handler(level))
    if log_file is not None:
        logger.addHandler(_file_handler(Path(log_file), level))
    return logger


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


__all__ = ["configure_logging", "get_logger", "resolve_level"]
