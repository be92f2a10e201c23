"""Session lifecycle: create → start → pause/resume … → complete | cancel.

:class:`SessionManager` is the only owner of the "current session" slot
and the only component that talks to both the timer engine and storage.

Auto-completion
---------------
The manager listens to the engine's ``completed`` signal.  When the work
phase of the last round finishes while a session is current, the session
is completed with the measured duration and pause data, exactly as if
``complete_session`` had been called.  Errors can't propagate out of a
Qt slot, so a failure there is logged and re-emitted on
``completion_failed``; the session stays current so the caller can retry.

Pause accounting
----------------
Kept in an immutable :class:`PauseLedger` that follows the engine's
``paused`` / ``resumed`` signals.  At most one pause is open at a time.
Seconds counted in break phases between rounds are not focus time and
are taken off the measured duration as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Mapping

from PyQt6.QtCore import QObject, pyqtSignal

from ..clock import Clock, SYSTEM_CLOCK
from ..errors import (
    AlreadyActiveError,
    NoActiveSessionError,
    NotFoundError,
    TimerError,
    ZenFocusError,
)
from ..modes import SessionMode, phase_config_for
from ..timer.engine import PhaseConfig, TimerEngine, TimerPhase, TimerSnapshot
from .cache import DEFAULT_TTL_SECONDS, TTLCache
from .history import HistoryFilter, filter_history
from .records import (
    Session,
    SessionCompletion,
    SessionConfig,
    complete_session,
    create_session,
    validate_completion,
)
from .stats import SessionStats, compute_stats

if TYPE_CHECKING:
    from ..database.store import SessionStore

logger = logging.getLogger(__name__)


# ── pause accounting ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class PauseLedger:
    """Pauses of the active session.  Instants are monotonic seconds."""

    pause_count: int = 0
    total_pause_seconds: float = 0.0
    paused_at: float | None = None

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None

    def begin(self, now: float) -> "PauseLedger":
        if self.paused_at is not None:
            raise TimerError("A pause is already open", "PAUSE_ALREADY_OPEN")
        return replace(self, pause_count=self.pause_count + 1, paused_at=now)

    def end(self, now: float) -> "PauseLedger":
        if self.paused_at is None:
            raise TimerError("No pause is open", "NO_OPEN_PAUSE")
        return replace(
            self,
            total_pause_seconds=self.total_pause_seconds + max(0.0, now - self.paused_at),
            paused_at=None,
        )

    def total_at(self, now: float) -> float:
        """Total pause time, counting an open pause up to *now*."""
        if self.paused_at is None:
            return self.total_pause_seconds
        return self.total_pause_seconds + max(0.0, now - self.paused_at)


# ── manager ──────────────────────────────────────────────────────────────


class SessionManager(QObject):
    """Coordinates the timer engine, session records and storage.

    Signals
    -------
    session_created / session_started / session_paused /
    session_resumed / session_completed / session_cancelled (session: Session)
    stats_updated(user_id: str | None)
        After a session is completed or cancelled.
    completion_failed(error: ZenFocusError)
        Auto-completion raised; the session is still current.
    """

    session_created = pyqtSignal(object)
    session_started = pyqtSignal(object)
    session_paused = pyqtSignal(object)
    session_resumed = pyqtSignal(object)
    session_completed = pyqtSignal(object)
    session_cancelled = pyqtSignal(object)
    stats_updated = pyqtSignal(object)
    completion_failed = pyqtSignal(object)

    def __init__(
        self,
        timer: TimerEngine,
        store: "SessionStore",
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        cache_ttl: float = DEFAULT_TTL_SECONDS,
        phase_config_factory: Callable[[SessionMode, int], PhaseConfig] = phase_config_for,
    ) -> None:
        super().__init__(parent)
        self._timer = timer
        self._store = store
        self._clock: Clock = clock or SYSTEM_CLOCK
        self._phase_config_factory = phase_config_factory
        self._cache: TTLCache[str, Session] = TTLCache(cache_ttl, clock=self._clock)

        self._current: Session | None = None
        self._pauses = PauseLedger()
        self._break_seconds = 0

        self._timer.tick.connect(self._on_timer_tick)
        self._timer.completed.connect(self._on_timer_completed)
        self._timer.paused.connect(self._on_timer_paused)
        self._timer.resumed.connect(self._on_timer_resumed)
        self._connected = True

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def timer(self) -> TimerEngine:
        return self._timer

    @property
    def store(self) -> "SessionStore":
        return self._store

    @property
    def pause_ledger(self) -> PauseLedger:
        return self._pauses

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def create_session(
        self,
        config: SessionConfig | Mapping[str, Any],
        user_id: str | None = None,
    ) -> Session:
        """Validate *config*, store a new session and return it."""
        session = create_session(config, user_id, clock=self._clock)
        self._store.save_session(session)
        self._cache.put(session.id, session)
        logger.info(
            "Created %s session %s (%ss) for %s",
            session.mode.value, session.id, session.planned_duration,
            session.user_id or "guest",
        )
        self.session_created.emit(session)
        return session

    def start_session(self, session_id: str) -> Session:
        if self._current is not None:
            raise AlreadyActiveError(self._current.id)

        session = self.get_session_by_id(session_id)
        if session is None:
            raise NotFoundError(session_id)

        self._pauses = PauseLedger()
        self._break_seconds = 0
        self._timer.initialize(
            session.planned_duration,
            self._phase_config_factory(session.mode, session.cycles),
        )
        self._timer.start()

        self._current = session
        logger.info("Started session %s", session.id)
        self.session_started.emit(session)
        return session

    def pause_session(self) -> None:
        session = self._require_current("pause")
        self._timer.pause()
        self.session_paused.emit(session)

    def resume_session(self) -> None:
        session = self._require_current("resume")
        self._timer.resume()
        self.session_resumed.emit(session)

    def complete_session(
        self,
        completion: SessionCompletion | Mapping[str, Any],
    ) -> Session:
        """Finish the current session with caller-supplied data.

        Storage is written before any state is cleared: if the save fails
        the session stays current and the error propagates.
        """
        session = self._require_current("complete")
        completion = validate_completion(completion)
        completed = complete_session(session, completion, clock=self._clock)

        self._store.save_session(completed)
        self._cache.invalidate(completed.id)
        self._clear_current()

        logger.info(
            "Completed session %s: %ss actual, %s pause(s), fully=%s",
            completed.id, completed.actual_duration, completed.pause_count,
            completed.completed_fully,
        )
        self.session_completed.emit(completed)
        self.stats_updated.emit(completed.user_id)
        return completed

    def cancel_session(self) -> Session:
        """Stop the current session early; it is stored as not completed."""
        session = self._require_current("cancel")
        cancelled = complete_session(
            session, self.measured_completion(completed_fully=False),
            clock=self._clock,
        )

        self._store.save_session(cancelled)
        self._timer.reset()
        self._cache.invalidate(cancelled.id)
        self._clear_current()

        logger.info(
            "Cancelled session %s after %ss", cancelled.id, cancelled.actual_duration,
        )
        self.session_cancelled.emit(cancelled)
        self.stats_updated.emit(cancelled.user_id)
        return cancelled

    def measured_completion(self, *, completed_fully: bool) -> SessionCompletion:
        """Completion data for the current session measured from the clock.

        Actual duration is the wall time since the session's start minus
        all pause time (an open pause included) and time spent in breaks.
        """
        session = self._require_current("measure")
        pause_seconds = self._pauses.total_at(self._clock.monotonic())
        elapsed = (self._clock.now() - session.start_time).total_seconds()
        focus = elapsed - pause_seconds - self._break_seconds
        return SessionCompletion(
            actual_duration=max(0, round(focus)),
            completed_fully=completed_fully,
            pause_count=self._pauses.pause_count,
            total_pause_time=round(pause_seconds),
        )

    # ══════════════════════════════════════════════════════════════════
    #  QUERIES
    # ══════════════════════════════════════════════════════════════════

    def get_current_session(self) -> Session | None:
        return self._current

    def is_session_active(self) -> bool:
        return self._current is not None

    def get_session_by_id(self, session_id: str) -> Session | None:
        cached = self._cache.get(session_id)
        if cached is not None:
            return cached
        session = self._store.get_session(session_id)
        if session is not None:
            self._cache.put(session_id, session)
        return session

    def get_session_history(
        self,
        user_id: str | None,
        history_filter: HistoryFilter | None = None,
    ) -> list[Session]:
        return filter_history(self._store.get_sessions_by_user_id(user_id), history_filter)

    def get_session_stats(self, user_id: str | None) -> SessionStats:
        """Stats over the user's finished sessions (the current one is
        still open and is left out)."""
        sessions = self._store.get_sessions_by_user_id(user_id)
        if self._current is not None:
            sessions = [s for s in sessions if s.id != self._current.id]
        return compute_stats(sessions)

    def shutdown(self) -> None:
        """Stop the timer, drop the current session and all listeners.

        Safe to call more than once.
        """
        if self._connected:
            self._timer.tick.disconnect(self._on_timer_tick)
            self._timer.completed.disconnect(self._on_timer_completed)
            self._timer.paused.disconnect(self._on_timer_paused)
            self._timer.resumed.disconnect(self._on_timer_resumed)
            self._connected = False
        self._timer.reset()
        self._clear_current()
        self._cache.clear()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _require_current(self, operation: str) -> Session:
        if self._current is None:
            raise NoActiveSessionError(operation)
        return self._current

    def _clear_current(self) -> None:
        self._current = None
        self._pauses = PauseLedger()
        self._break_seconds = 0

    def _on_timer_tick(self, snapshot: TimerSnapshot) -> None:
        if self._current is not None and snapshot.phase == TimerPhase.BREAK:
            self._break_seconds += 1

    def _on_timer_paused(self, _data: dict) -> None:
        if self._current is None or self._pauses.is_paused:
            return
        self._pauses = self._pauses.begin(self._clock.monotonic())

    def _on_timer_resumed(self, _data: dict) -> None:
        if self._current is None or not self._pauses.is_paused:
            return
        self._pauses = self._pauses.end(self._clock.monotonic())

    def _on_timer_completed(self, data: dict) -> None:
        if self._current is None or data["phase"] != TimerPhase.WORK:
            return
        if data["cycle"] < self._timer.total_cycles:
            logger.debug(
                "Session %s finished round %s/%s",
                self._current.id, data["cycle"], self._timer.total_cycles,
            )
            return
        try:
            self.complete_session(self.measured_completion(completed_fully=True))
        except ZenFocusError as exc:
            logger.exception("Failed to auto-complete session %s", self._current.id)
            self.completion_failed.emit(exc)
