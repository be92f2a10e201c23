"""Wall-clock source.

Timestamps stored on sessions are naive local datetimes (the same
convention the SQLite store round-trips).  Tick and pause measurement use
the monotonic clock so a system clock change can't bend a countdown.
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...

    def monotonic(self) -> float: ...


class SystemClock:
    """The real clock."""

    def now(self) -> datetime:
        return datetime.now()

    def monotonic(self) -> float:
        return time.monotonic()


SYSTEM_CLOCK = SystemClock()
