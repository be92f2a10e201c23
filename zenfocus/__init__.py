"""ZenFocus: timer and session engine for a focus-timer app."""

import logging

from .errors import (
    ZenFocusError,
    ValidationError,
    NotFoundError,
    AlreadyActiveError,
    NoActiveSessionError,
    PersistenceError,
    TimerError,
)
from .modes import SessionMode, AmbientSound

__version__ = "0.1.0"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Console logging for the command-line runner.  The library itself
    never configures logging on import."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = [
    "ZenFocusError",
    "ValidationError",
    "NotFoundError",
    "AlreadyActiveError",
    "NoActiveSessionError",
    "PersistenceError",
    "TimerError",
    "SessionMode",
    "AmbientSound",
    "configure_logging",
]
