"""Tests for statistics aggregation and history filtering."""

from datetime import datetime, timedelta

import pytest

from zenfocus.errors import ValidationError
from zenfocus.modes import SessionMode
from zenfocus.sessions.history import HistoryFilter, filter_history
from zenfocus.sessions.records import Session
from zenfocus.sessions.stats import (
    ModeTotals,
    SessionStats,
    completion_rate,
    compute_stats,
    current_streak,
    longest_streak,
    mode_breakdown,
    total_focus_time,
)

T0 = datetime(2026, 3, 2, 9, 0, 0)

_counter = 0


def _s(completed=True, actual=1500, mode=SessionMode.STUDY, at=T0):
    global _counter
    _counter += 1
    return Session(
        id=f"s-{_counter}", mode=mode, start_time=at,
        end_time=at + timedelta(seconds=actual),
        planned_duration=1500, actual_duration=actual, completed_fully=completed,
    )


def _day(n, hour=9):
    return T0.replace(hour=hour) + timedelta(days=n)


# ═══════════════════════════════════════════════════════════════════════════
#  SIMPLE AGGREGATES
# ═══════════════════════════════════════════════════════════════════════════


class TestAggregates:

    def test_empty_history(self):
        stats = compute_stats([])
        assert stats == SessionStats()
        assert stats.total_focus_time == 0
        assert stats.completion_rate == 0
        assert stats.current_streak == 0
        assert stats.longest_streak == 0
        assert set(stats.mode_breakdown) == set(SessionMode)

    def test_total_focus_time_includes_incomplete(self):
        sessions = [_s(actual=1500), _s(completed=False, actual=300)]
        assert total_focus_time(sessions) == 1800

    @pytest.mark.parametrize("completed, total, rate", [
        (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 2, 50), (3, 3, 100), (1, 8, 13),
    ])
    def test_completion_rate_rounds_half_up(self, completed, total, rate):
        sessions = [_s(completed=i < completed) for i in range(total)]
        assert completion_rate(sessions) == rate

    def test_mode_breakdown_fills_every_mode(self):
        sessions = [
            _s(mode=SessionMode.STUDY, actual=1500),
            _s(mode=SessionMode.STUDY, actual=600, completed=False),
            _s(mode=SessionMode.ZEN, actual=600),
        ]
        breakdown = mode_breakdown(sessions)
        assert breakdown[SessionMode.STUDY] == ModeTotals(2, 2100)
        assert breakdown[SessionMode.ZEN] == ModeTotals(1, 600)
        assert breakdown[SessionMode.YOGA] == ModeTotals(0, 0)
        assert len(breakdown) == len(SessionMode)

    def test_compute_stats_counts(self):
        sessions = [_s(), _s(), _s(completed=False)]
        stats = compute_stats(sessions)
        assert stats.total_sessions == 3
        assert stats.completed_sessions == 2
        assert stats.completion_rate == 67


# ═══════════════════════════════════════════════════════════════════════════
#  STREAKS
# ═══════════════════════════════════════════════════════════════════════════


class TestCurrentStreak:

    def test_all_completed(self):
        sessions = [_s(at=T0 + timedelta(hours=i)) for i in range(4)]
        assert current_streak(sessions) == 4

    def test_stops_at_most_recent_incomplete(self):
        sessions = [
            _s(at=T0),
            _s(at=T0 + timedelta(hours=1), completed=False),
            _s(at=T0 + timedelta(hours=2)),
            _s(at=T0 + timedelta(hours=3)),
        ]
        assert current_streak(sessions) == 2

    def test_latest_incomplete_means_zero(self):
        sessions = [_s(at=T0), _s(at=T0 + timedelta(hours=1), completed=False)]
        assert current_streak(sessions) == 0

    def test_input_order_does_not_matter(self):
        sessions = [
            _s(at=T0 + timedelta(hours=3)),
            _s(at=T0, completed=False),
            _s(at=T0 + timedelta(hours=1)),
        ]
        assert current_streak(sessions) == 2


class TestLongestStreak:

    def test_single_day(self):
        assert longest_streak([_s(at=_day(0)), _s(at=_day(0, 15))]) == 1

    def test_consecutive_days(self):
        sessions = [_s(at=_day(n)) for n in range(5)]
        assert longest_streak(sessions) == 5

    def test_gap_breaks_the_run(self):
        days = [0, 1, 2, 4, 5, 6, 7, 10]
        assert longest_streak([_s(at=_day(n)) for n in days]) == 4

    def test_day_with_only_incomplete_sessions_breaks_the_run(self):
        sessions = [
            _s(at=_day(0)), _s(at=_day(1)),
            _s(at=_day(2), completed=False),
            _s(at=_day(3)),
        ]
        assert longest_streak(sessions) == 2

    def test_incomplete_session_on_qualifying_day_is_ignored(self):
        sessions = [
            _s(at=_day(0)),
            _s(at=_day(1, 8), completed=False), _s(at=_day(1, 17)),
            _s(at=_day(2)),
        ]
        assert longest_streak(sessions) == 3

    def test_no_completed_sessions(self):
        assert longest_streak([_s(completed=False)]) == 0


# ═══════════════════════════════════════════════════════════════════════════
#  HISTORY FILTER
# ═══════════════════════════════════════════════════════════════════════════


class TestHistoryFilter:

    @pytest.fixture
    def history(self):
        return [
            _s(at=_day(0), mode=SessionMode.STUDY),
            _s(at=_day(1), mode=SessionMode.ZEN, completed=False),
            _s(at=_day(2), mode=SessionMode.STUDY),
            _s(at=_day(3), mode=SessionMode.YOGA),
            _s(at=_day(4), mode=SessionMode.STUDY, completed=False),
        ]

    def test_no_filter_sorts_newest_first(self, history):
        result = filter_history(reversed(history))
        assert result == list(reversed(history))

    def test_date_bounds_are_inclusive(self, history):
        result = filter_history(history, HistoryFilter(
            start_date=_day(1), end_date=_day(3),
        ))
        assert [s.start_time for s in result] == [_day(3), _day(2), _day(1)]

    @pytest.mark.parametrize("mode", [SessionMode.STUDY, "study"])
    def test_mode(self, history, mode):
        result = filter_history(history, HistoryFilter(mode=mode))
        assert len(result) == 3
        assert all(s.mode == SessionMode.STUDY for s in result)

    def test_completed_only(self, history):
        result = filter_history(history, HistoryFilter(completed_only=True))
        assert len(result) == 3
        assert all(s.completed_fully for s in result)

    def test_filters_combine(self, history):
        result = filter_history(history, HistoryFilter(
            mode=SessionMode.STUDY, completed_only=True, start_date=_day(1),
        ))
        assert result == [history[2]]

    def test_pagination(self, history):
        first = filter_history(history, HistoryFilter(page=0, limit=2))
        second = filter_history(history, HistoryFilter(page=1, limit=2))
        third = filter_history(history, HistoryFilter(page=2, limit=2))

        assert first == [history[4], history[3]]
        assert second == [history[2], history[1]]
        assert third == [history[0]]

    def test_limit_without_page(self, history):
        assert filter_history(history, HistoryFilter(limit=1)) == [history[4]]

    def test_page_past_the_end_is_empty(self, history):
        assert filter_history(history, HistoryFilter(page=9, limit=2)) == []

    @pytest.mark.parametrize("f", [
        HistoryFilter(limit=0),
        HistoryFilter(page=-1, limit=2),
        HistoryFilter(mode="napping"),
    ])
    def test_invalid_filter(self, history, f):
        with pytest.raises(ValidationError):
            filter_history(history, f)
