"""Logging utilities backed by rich console output.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Traversing repository %s", unit)
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

# Shared console so log records and CLI status lines interleave correctly
console = Console()


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def _has_rich_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, RichHandler) for h in logger.handlers)


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a logger configured with a rich handler.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level name. If None, uses LOG_LEVEL or defaults to INFO.
        show_time: Show timestamps in console output
        show_path: Show source path in console output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(level.upper())

    # After setup_logging the root handler prints for every logger
    if not _has_rich_handler(logging.getLogger()):
        logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # Keep propagation so pytest caplog sees records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger once at the CLI entry point.

    Args:
        level: Default level; LOG_LEVEL overrides it
        log_file: Optional path that also receives timestamped records
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler(show_time=True))

    # Loggers created at import time carry their own console handler
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and _has_rich_handler(logger):
            logger.handlers[:] = [h for h in logger.handlers if not isinstance(h, RichHandler)]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def progress(message: str) -> None:
    """Print a plain status line."""
    console.print(message)


def success(message: str) -> None:
    """Print a status line with a green check mark."""
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    """Print a status line with a yellow warning sign."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print an error line to stderr with a red cross."""
    Console(stderr=True).print(f"[red]✗[/red] {message}")
