"""Diagnostic logging setup."""

# ============================================================
# Imports
# ============================================================

import logging
import sys

from .output import Color


# ============================================================
# Formatting
# ============================================================

class ColoredFormatter(logging.Formatter):
    """Colorized stderr formatter."""

    COLORS = {
        'DEBUG': Color.GRAY,
        'INFO': Color.BLUE,
        'WARNING': Color.YELLOW,
        'ERROR': Color.RED,
        'CRITICAL': Color.RED,
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as `LEVEL logger: message`."""
        level = record.levelname
        if self.use_colors:
            level = f"{self.COLORS.get(level, '')}{level}{Color.RESET}"

        message = f"{level} {record.name}: {record.getMessage()}"
        if record.exc_info:
            message += '\n' + self.formatException(record.exc_info)
        return message


# ============================================================
# Setup
# ============================================================

def setup_logger(verbose: bool = False, name: str = 'dotfileslib') -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Log debug diagnostics instead of warnings only
        name: Logger name, the package root by default

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers so repeated setup does not duplicate lines
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger
