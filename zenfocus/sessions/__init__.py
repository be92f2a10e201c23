"""Session records, lifecycle and statistics."""

from .records import (
    Session,
    SessionConfig,
    SessionCompletion,
    create_session,
    complete_session,
    efficiency,
    duration_from_timestamps,
    is_guest,
)
from .cache import TTLCache
from .history import HistoryFilter, filter_history
from .stats import SessionStats, ModeTotals, compute_stats
from .manager import SessionManager, PauseLedger

__all__ = [
    "Session",
    "SessionConfig",
    "SessionCompletion",
    "create_session",
    "complete_session",
    "efficiency",
    "duration_from_timestamps",
    "is_guest",
    "TTLCache",
    "HistoryFilter",
    "filter_history",
    "SessionStats",
    "ModeTotals",
    "compute_stats",
    "SessionManager",
    "PauseLedger",
]
