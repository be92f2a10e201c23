"""Timer package."""

from .engine import (
    TimerEngine,
    TimerStatus,
    TimerPhase,
    TimerSnapshot,
    PhaseConfig,
    DEFAULT_WORK_SECONDS,
    TICK_INTERVAL_MS,
)

__all__ = [
    "TimerEngine",
    "TimerStatus",
    "TimerPhase",
    "TimerSnapshot",
    "PhaseConfig",
    "DEFAULT_WORK_SECONDS",
    "TICK_INTERVAL_MS",
]
