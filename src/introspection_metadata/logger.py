"""Logging setup for introspection_metadata, rendered through Rich."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install

LOGGER_NAME = "introspection_metadata"
LOG_FILE_FORMAT = "%(asctime)s:%(levelname)s:%(message)s"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get the package logger, attaching a RichHandler on first use.

    The handler is attached to the package logger only, so importing the package
    inside a GraphQL server does not reconfigure the host's root logger.

    Args:
        name: Logger name (default: "introspection_metadata")

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)

    return logger


def configure_logging(level: str | int = "INFO", log_file: Path | None = None) -> logging.Logger:
    """
    Set the package log level and optionally mirror records to a file.

    Args:
        level: Log level name or number
        log_file: Optional file receiving a plain-text copy of every record

    Returns:
        The package logger
    """
    logger = get_logger()

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.level == logging.DEBUG:
        _ = install(show_locals=True)

    return logger
