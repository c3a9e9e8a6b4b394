"""
Console logging for the command line tool.
"""

from __future__ import annotations

import logging

import click

LEVEL_COLORS = {
    logging.DEBUG: "cyan",
    logging.INFO: None,
    logging.WARNING: "yellow",
    logging.ERROR: "bright_red",
    logging.CRITICAL: "bright_red",
}


class ClickLogHandler(logging.Handler):
    """Logging handler echoing records through click, colored by level."""

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.WARNING:
                message = f"{record.levelname}: {message}"
            fg = LEVEL_COLORS.get(record.levelno)
            if self.color and fg:
                message = click.style(message, fg=fg)
            click.echo(message, err=record.levelno >= logging.WARNING, color=self.color)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False, no_color: bool = False) -> logging.Logger:
    """
    Route the package's log records to the console.

    Args:
        verbose: Show debug records
        no_color: Disable colored output

    Returns:
        The package's root logger
    """
    logger = logging.getLogger("controllers_to_sdk")
    logger.handlers = [h for h in logger.handlers if not isinstance(h, ClickLogHandler)]
    logger.addHandler(ClickLogHandler(color=not no_color))
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
