"""Logging utilities with rich output for the code-critic CLI.

All modules log through the standard library logger returned by
``get_logger``; records are rendered by a shared rich console.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Using branch feature/login")
    logger.debug("git log master..feature/login --name-only")
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Global console instance for consistent output
console = Console()


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler())

    # Propagate so pytest caplog sees the records
    logger.propagate = True

    return logger


def set_level(level: str) -> None:
    """Change the level of every logger created through ``get_logger``."""
    level = level.upper()
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and any(
            isinstance(h, RichHandler) for h in logger.handlers
        ):
            logger.setLevel(level)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Setup logging configuration for the entire application.

    Called once at the CLI entry point. LOG_LEVEL in the environment
    overrides ``level``. Console output comes from the handlers attached
    by ``get_logger``; the root logger only gets the optional file handler.

    Args:
        level: Default logging level for all modules
        log_file: Optional file path to also log to a file
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # Module loggers were created at import time, before the CLI parsed its flags
    set_level(level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def progress(message: str, end: str = "\n") -> None:
    """Print a progress message without the logger prefix.

    Example:
        >>> progress(".", end="")
        .
    """
    console.print(message, end=end, markup=False, highlight=False)


def success(message: str) -> None:
    """Print a success message with a green checkmark."""
    console.print(f"[green]✓[/green] {escape(message)}")


def error(message: str) -> None:
    """Print an error message with a red X icon to stderr."""
    Console(stderr=True).print(f"[red]✗[/red] {escape(message)}")
