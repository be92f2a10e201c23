"""Statistics derived from a user's session history.

Everything here is a pure function of a list of sessions; nothing is
stored.  Times are seconds.

Streaks
-------
``current_streak`` counts sessions: the run of fully completed sessions
ending with the most recent one.  ``longest_streak`` counts days: a local
calendar day qualifies when it holds at least one fully completed
session, and the streak is the longest run of qualifying days with no day
missing in between.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from ..modes import SessionMode
from .records import Session


@dataclass(frozen=True)
class ModeTotals:
    count: int = 0
    total_time: int = 0


@dataclass(frozen=True)
class SessionStats:
    total_focus_time: int = 0
    completion_rate: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_sessions: int = 0
    completed_sessions: int = 0
    mode_breakdown: dict[SessionMode, ModeTotals] = field(
        default_factory=lambda: {m: ModeTotals() for m in SessionMode}
    )


def total_focus_time(sessions: Iterable[Session]) -> int:
    return sum(s.actual_duration for s in sessions)


def completion_rate(sessions: Iterable[Session]) -> int:
    """Percentage of sessions completed fully, rounded half up."""
    sessions = list(sessions)
    if not sessions:
        return 0
    completed = sum(1 for s in sessions if s.completed_fully)
    return math.floor(completed / len(sessions) * 100 + 0.5)


def mode_breakdown(sessions: Iterable[Session]) -> dict[SessionMode, ModeTotals]:
    """Count and total time per mode; every mode is present."""
    counts = {m: 0 for m in SessionMode}
    times = {m: 0 for m in SessionMode}
    for s in sessions:
        counts[s.mode] += 1
        times[s.mode] += s.actual_duration
    return {m: ModeTotals(counts[m], times[m]) for m in SessionMode}


def current_streak(sessions: Iterable[Session]) -> int:
    streak = 0
    for s in sorted(sessions, key=lambda s: s.start_time, reverse=True):
        if not s.completed_fully:
            break
        streak += 1
    return streak


def longest_streak(sessions: Iterable[Session]) -> int:
    qualifying: set[date] = set()
    for s in sessions:
        if s.completed_fully:
            qualifying.add(s.start_time.date())

    longest = run = 0
    previous: date | None = None
    for day in sorted(qualifying):
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def compute_stats(sessions: Iterable[Session]) -> SessionStats:
    sessions = list(sessions)
    return SessionStats(
        total_focus_time=total_focus_time(sessions),
        completion_rate=completion_rate(sessions),
        current_streak=current_streak(sessions),
        longest_streak=longest_streak(sessions),
        total_sessions=len(sessions),
        completed_sessions=sum(1 for s in sessions if s.completed_fully),
        mode_breakdown=mode_breakdown(sessions),
    )
