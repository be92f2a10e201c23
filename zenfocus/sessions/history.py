"""Filtering and paging of a session history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ..errors import ValidationError
from ..modes import SessionMode
from .records import Session


@dataclass(frozen=True)
class HistoryFilter:
    """Which sessions to return.  Dates bound ``start_time`` inclusively;
    ``page`` is 0-based and only applies together with ``limit``."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    mode: SessionMode | str | None = None
    completed_only: bool = False
    page: int | None = None
    limit: int | None = None


def filter_history(
    sessions: Iterable[Session],
    history_filter: HistoryFilter | None = None,
) -> list[Session]:
    """Apply *history_filter* and return the sessions newest first."""
    f = history_filter or HistoryFilter()
    result = list(sessions)

    if f.start_date is not None:
        result = [s for s in result if s.start_time >= f.start_date]
    if f.end_date is not None:
        result = [s for s in result if s.start_time <= f.end_date]
    if f.mode is not None:
        mode = SessionMode.parse(f.mode)
        result = [s for s in result if s.mode == mode]
    if f.completed_only:
        result = [s for s in result if s.completed_fully]

    result.sort(key=lambda s: s.start_time, reverse=True)

    if f.limit is not None:
        if f.limit < 1:
            raise ValidationError("History limit must be at least 1")
        page = f.page or 0
        if page < 0:
            raise ValidationError("History page must be non-negative")
        start = page * f.limit
        result = result[start:start + f.limit]
    return result
