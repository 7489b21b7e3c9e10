"""Logging system with Rich support.

Messages of the ``spotscan`` namespace go to stderr, through Rich when
enabled, so that JSON reports printed on stdout stay machine readable.
Output captured from build tools and SpotBugs is logged on the dedicated
``spotscan.output`` logger at DEBUG level.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from spotscan.core.config.settings import LoggingSettings, get_settings

ROOT_LOGGER_NAME = "spotscan"
OUTPUT_LOGGER_NAME = f"{ROOT_LOGGER_NAME}.output"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Setup logging for the spotscan namespace.

    Handlers installed by a previous call are replaced.

    Args:
        settings: Logging settings. Uses global settings if not provided.
    """
    if settings is None:
        settings = get_settings().logging

    level = getattr(logging, settings.level)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
        existing.close()

    handler: RichHandler | logging.StreamHandler
    if settings.use_rich:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            # Tool output is full of brackets
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(settings.format))

    root_logger.addHandler(handler)

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger, configuring the spotscan namespace on first use.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logging()

    return logging.getLogger(name)


def log_command_output(command_line: str, output: str) -> None:
    """Log the output captured from an external command.

    Args:
        command_line: Shell-quoted command that produced the output.
        output: Combined standard output and standard error.
    """
    output_logger = logging.getLogger(OUTPUT_LOGGER_NAME)
    if not output_logger.isEnabledFor(logging.DEBUG):
        return

    output_logger.debug(f"$ {command_line}")
    for line in output.splitlines():
        output_logger.debug(line)
