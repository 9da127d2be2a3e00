"""
Logging setup for the draft engine.

Log records go to stdout and, when LOG_FILE is set, to that file as
well. Chatty library loggers (the HTTP server, SQLAlchemy and the GitHub
client) are held at WARNING so draft lifecycle and retry messages stay
readable.
"""

import logging
import sys

from docpush.core.config import Settings

QUIET_LOGGERS = ("uvicorn", "fastapi", "sqlalchemy", "github")


def setup_logging(settings: Settings) -> None:
    """
    Install the root handlers described by the settings.

    Calling it again replaces the previous handlers, so each app built
    by create_app() logs exactly once per record.

    Args:
        settings: Provides LOG_LEVEL, LOG_FORMAT and LOG_FILE
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    root.handlers.clear()

    formatter = logging.Formatter(settings.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the module logger; pass __name__."""
    return logging.getLogger(name)
