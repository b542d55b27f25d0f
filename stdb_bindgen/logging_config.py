"""Logging setup shared by the package.

Modules call ``get_logger(__name__)``; the CLI calls ``setup_logging`` once
to attach a rich console handler (and optionally a log file).
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "stdb_bindgen"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the package hierarchy."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str = "WARNING", log_file: str | Path | None = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Log level name for the console handler.
        log_file: Optional file that receives DEBUG and above.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)

    # Replace handlers from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
