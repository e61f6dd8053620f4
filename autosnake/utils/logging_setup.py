"""
Logging setup - route autosnake log records through rich.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config_loader import LoggingConfig


LOGGER_NAME = "autosnake"


def setup_logging(config: Optional[LoggingConfig] = None,
                  console: Optional[Console] = None) -> logging.Logger:
    """
    Configure the package logger.

    Replaces handlers from any earlier call, so it is safe to call once
    per run.

    Args:
        config: Level and optional log file (defaults to LoggingConfig())
        console: Rich console to log to (defaults to stderr)

    Returns:
        The configured "autosnake" logger
    """
    if config is None:
        config = LoggingConfig()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console is None:
        console = Console(stderr=True)
    logger.addHandler(RichHandler(console=console, show_path=False, markup=False))

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
