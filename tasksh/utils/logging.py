"""
Logging utilities for tasksh.

Everything logs under the "tasksh" logger hierarchy. Console output goes to
stderr so stdout only ever carries the suggested command; an optional file
handler receives the same records without colour codes.
"""

import logging
import os
import sys
from pathlib import Path
from typing import IO, Optional, Union

from tasksh.config.settings import Settings, settings

LOGGER_NAME = "tasksh"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Loggers of HTTP libraries that are chatty at DEBUG
NOISY_LIBRARIES = ("openai", "httpx")


class LogFormatter(logging.Formatter):
    """Formatter that can colour the level name with ANSI codes."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = True):
        """
        Initialize the formatter.

        Args:
            use_colors (bool): Whether to colour level names.
        """
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_colors = use_colors

    def _colorize(self, levelname: str) -> str:
        color = self.COLORS.get(levelname)
        if not self.use_colors or color is None:
            return levelname
        return f"{color}{levelname}{self.COLORS['RESET']}"

    def format(self, record: logging.LogRecord) -> str:
        plain = record.levelname
        record.levelname = self._colorize(plain)
        try:
            return super().format(record)
        finally:
            # Records are shared between handlers
            record.levelname = plain


def resolve_level(log_level: Optional[str]) -> str:
    """Normalize a level name, falling back to WARNING for unknown names."""
    requested = (log_level or "WARNING").upper()
    return requested if requested in LEVEL_NAMES else "WARNING"


def _attach(
    logger: logging.Logger,
    handler: logging.Handler,
    level: int,
    use_colors: bool,
) -> None:
    handler.setLevel(level)
    handler.setFormatter(LogFormatter(use_colors=use_colors))
    logger.addHandler(handler)


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    use_colors: bool = True,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the tasksh logger.

    Existing handlers are replaced, so calling this again reconfigures
    logging instead of duplicating output.

    Args:
        log_level (str): Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file (Optional[Union[str, Path]]): Also write records here.
        use_colors (bool): Colour console level names when the terminal
            supports it.
        stream (Optional[IO[str]]): Console stream, stderr by default.

    Returns:
        logging.Logger: The configured package logger.
    """
    from tasksh.utils import platform_utils

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    level_name = resolve_level(log_level)
    level = getattr(logging, level_name)
    logger.setLevel(level)

    for library in NOISY_LIBRARIES:
        logging.getLogger(library).setLevel(logging.WARNING)

    _attach(
        logger,
        logging.StreamHandler(stream or sys.stderr),
        level,
        use_colors and platform_utils.supports_ansi_colors(),
    )

    if log_file:
        log_path = Path(log_file)
        os.makedirs(log_path.parent, exist_ok=True)
        _attach(
            logger,
            logging.FileHandler(log_path, encoding="utf-8"),
            level,
            use_colors=False,
        )

    logger.debug(f"Logging initialized at level {level_name}")
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the tasksh hierarchy.

    Args:
        name (Optional[str]): Dotted name relative to the package, e.g.
            "generator.engine".

    Returns:
        logging.Logger: Logger instance.
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def initialize_logging(
    default_level: str = "WARNING", active_settings: Optional[Settings] = None
) -> logging.Logger:
    """
    Configure logging from the "advanced" section of a settings file.

    Args:
        default_level (str): Level used when the settings hold none.
        active_settings (Optional[Settings]): Settings to read. Defaults to
            the global instance.

    Returns:
        logging.Logger: The configured package logger.
    """
    source = active_settings or settings
    return setup_logging(
        log_level=source.get("advanced", "log_level", default_level),
        log_file=source.get_log_file_path(),
    )
