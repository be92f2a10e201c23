"""Countdown state machine for ZenFocus.

States
------
IDLE        Loaded with a phase, waiting for start.
RUNNING     Counting down, one tick per wall-clock second.
PAUSED      Frozen; remaining time is kept exactly.
COMPLETED   The phase reached zero (remaining == 0).

Transitions
-----------
IDLE → RUNNING                  (start)
RUNNING → PAUSED                (pause)
PAUSED → RUNNING                (resume, or start)
RUNNING → COMPLETED             (remaining reaches 0, or complete_phase)
COMPLETED → IDLE | RUNNING      (next phase loaded; RUNNING with auto_advance)
Any → IDLE                      (reset / initialize)

Phases
------
A work phase is followed by a break when ``PhaseConfig.break_seconds`` is
non-zero.  A cycle is one work phase plus its break; after the last of
``total_cycles`` cycles the engine stays COMPLETED.

Timing
------
The Qt timer is single-shot and re-armed for the next whole-second
boundary measured on the monotonic clock.  Each callback counts the whole
seconds elapsed since the last counted instant, so a late callback
catches up instead of losing time.  One ``tick`` is emitted per counted
second, including the final one to zero.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..clock import Clock, SYSTEM_CLOCK
from ..errors import TimerError

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class TimerPhase(Enum):
    WORK = "work"
    BREAK = "break"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_WORK_SECONDS = 25 * 60
TICK_INTERVAL_MS = 1000


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PhaseConfig:
    """How phases follow each other after the first work phase."""

    break_seconds: int = 0
    total_cycles: int = 1
    auto_advance: bool = False

    @property
    def has_break(self) -> bool:
        return self.break_seconds > 0

    def validate(self) -> None:
        if self.break_seconds < 0:
            raise TimerError("Break duration must be non-negative", "INVALID_CONFIG")
        if self.total_cycles < 1:
            raise TimerError("Total cycles must be at least 1", "INVALID_CONFIG")


@dataclass(frozen=True)
class TimerSnapshot:
    status: TimerStatus
    remaining_seconds: int
    total_seconds: int
    phase: TimerPhase
    current_cycle: int
    total_cycles: int

    @property
    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.remaining_seconds

    @property
    def progress(self) -> float:
        """0.0 → 1.0 through the current phase."""
        if self.total_seconds <= 0:
            return 0.0
        return max(0.0, min(1.0, self.elapsed_seconds / self.total_seconds))


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based countdown with work/break phases and cycles.

    Signals
    -------
    tick(snapshot: TimerSnapshot)
        Once per counted second while running.
    started(data: dict) / paused(data: dict) / resumed(data: dict)
        Keys: ``phase``, ``remaining_seconds``.
    was_reset(data: dict)
        Keys: ``phase``, ``remaining_seconds``.
    completed(data: dict)
        A phase reached zero.  Keys: ``phase``, ``cycle``,
        ``cycle_completed`` (True when this ends a cycle).
    phase_changed(data: dict)
        Keys: ``from_phase``, ``to_phase``, ``cycle``.
    cycle_completed(data: dict)
        Keys: ``cycle``, ``total_cycles``.
    state_changed(new_status: TimerStatus)
        Every status transition.
    """

    tick = pyqtSignal(object)
    started = pyqtSignal(object)
    paused = pyqtSignal(object)
    resumed = pyqtSignal(object)
    was_reset = pyqtSignal(object)
    completed = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    cycle_completed = pyqtSignal(object)
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock: Clock = clock or SYSTEM_CLOCK

        # ── configuration ─────────────────────────────────────────────
        self._work_seconds: int = DEFAULT_WORK_SECONDS
        self._config: PhaseConfig = PhaseConfig()

        # ── countdown state ───────────────────────────────────────────
        self._status: TimerStatus = TimerStatus.IDLE
        self._phase: TimerPhase = TimerPhase.WORK
        self._total: int = self._work_seconds
        self._remaining: int = self._total
        self._cycle: int = 1

        # monotonic instant up to which seconds have been counted
        self._anchor: float | None = None
        # bumped by initialize/reset/restore so a signal handler that
        # re-initializes mid-transition isn't overwritten
        self._generation: int = 0

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setSingleShot(True)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def remaining(self) -> int:
        """Seconds left in the current phase."""
        return self._remaining

    @property
    def total(self) -> int:
        """Configured seconds for the current phase."""
        return self._total

    @property
    def work_seconds(self) -> int:
        return self._work_seconds

    @property
    def phase_config(self) -> PhaseConfig:
        return self._config

    @property
    def current_cycle(self) -> int:
        return self._cycle

    @property
    def total_cycles(self) -> int:
        return self._config.total_cycles

    @property
    def is_running(self) -> bool:
        return self._status == TimerStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self._status == TimerStatus.PAUSED

    @property
    def percent_complete(self) -> float:
        return self.snapshot().progress

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            status=self._status,
            remaining_seconds=self._remaining,
            total_seconds=self._total,
            phase=self._phase,
            current_cycle=self._cycle,
            total_cycles=self._config.total_cycles,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def initialize(
        self,
        duration_seconds: int,
        phase_config: PhaseConfig | None = None,
    ) -> None:
        """Load a fresh work phase of *duration_seconds* and go IDLE."""
        if duration_seconds < 1:
            raise TimerError(
                f"Duration must be at least 1 second (got {duration_seconds})",
                "INVALID_DURATION",
            )
        config = phase_config or PhaseConfig()
        config.validate()

        self._stop_ticking()
        self._generation += 1
        self._work_seconds = int(duration_seconds)
        self._config = config
        self._cycle = 1
        self._load_phase(TimerPhase.WORK, self._work_seconds)
        logger.debug(
            "Timer initialized: %ss work, %ss break, %s cycle(s)",
            self._work_seconds, config.break_seconds, config.total_cycles,
        )

    def start(self) -> None:
        """Start counting.  No-op when already running; resumes when paused."""
        if self._status == TimerStatus.RUNNING:
            return
        if self._status == TimerStatus.PAUSED:
            self.resume()
            return
        if self._status == TimerStatus.COMPLETED:
            raise TimerError(
                "Timer has completed; reset or initialize it first",
                "INVALID_START",
            )
        self._begin_running()
        self.started.emit(self._control_payload())

    def pause(self) -> None:
        if self._status != TimerStatus.RUNNING:
            raise TimerError(
                f"Timer cannot be paused while {self._status.value}",
                "INVALID_PAUSE",
            )
        self._stop_ticking()
        self._set_status(TimerStatus.PAUSED)
        self.paused.emit(self._control_payload())

    def resume(self) -> None:
        if self._status != TimerStatus.PAUSED:
            raise TimerError(
                f"Timer cannot be resumed while {self._status.value}",
                "INVALID_RESUME",
            )
        self._begin_running()
        self.resumed.emit(self._control_payload())

    def reset(self) -> None:
        """Back to the first work phase, cycle 1, IDLE.  Allowed from any state."""
        self._stop_ticking()
        self._generation += 1
        self._cycle = 1
        self._load_phase(TimerPhase.WORK, self._work_seconds)
        self.was_reset.emit(self._control_payload())

    def complete_phase(self) -> None:
        """Finish the current phase now, as if it had counted down."""
        if self._status not in (TimerStatus.RUNNING, TimerStatus.PAUSED):
            raise TimerError(
                "Timer must be running or paused to complete",
                "INVALID_COMPLETE",
            )
        self._stop_ticking()
        self._remaining = 0
        self._finish_phase()

    def restore(
        self,
        snapshot: TimerSnapshot,
        phase_config: PhaseConfig | None = None,
        work_seconds: int | None = None,
    ) -> None:
        """Load a previously taken snapshot.

        A snapshot taken while running comes back PAUSED; the caller
        decides when to resume.
        """
        config = phase_config or PhaseConfig(total_cycles=snapshot.total_cycles)
        config.validate()
        if snapshot.total_seconds < 1:
            raise TimerError("Snapshot total must be at least 1 second", "INVALID_STATE")
        if not 0 <= snapshot.remaining_seconds <= snapshot.total_seconds:
            raise TimerError("Snapshot remaining time out of range", "INVALID_STATE")
        if not 1 <= snapshot.current_cycle <= config.total_cycles:
            raise TimerError("Snapshot cycle out of range", "INVALID_STATE")
        if (snapshot.remaining_seconds == 0) != (snapshot.status == TimerStatus.COMPLETED):
            raise TimerError(
                "Snapshot must be completed exactly when no time remains",
                "INVALID_STATE",
            )

        self._stop_ticking()
        self._generation += 1
        self._config = config
        self._work_seconds = work_seconds or (
            snapshot.total_seconds if snapshot.phase == TimerPhase.WORK
            else self._work_seconds
        )
        self._phase = snapshot.phase
        self._cycle = snapshot.current_cycle
        self._total = snapshot.total_seconds
        self._remaining = snapshot.remaining_seconds
        status = snapshot.status
        if status == TimerStatus.RUNNING:
            status = TimerStatus.PAUSED
        self._set_status(status)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _begin_running(self) -> None:
        self._anchor = self._clock.monotonic()
        self._set_status(TimerStatus.RUNNING)
        self._qt_timer.start(TICK_INTERVAL_MS)

    def _stop_ticking(self) -> None:
        self._qt_timer.stop()
        self._anchor = None

    def _schedule_next(self) -> None:
        """Re-arm the single-shot timer for the next whole-second boundary."""
        if self._anchor is None:
            return
        until = self._anchor + 1.0 - self._clock.monotonic()
        self._qt_timer.start(max(0, math.ceil(until * 1000)))

    def _on_tick(self) -> None:
        if self._status != TimerStatus.RUNNING or self._anchor is None:
            return

        steps = int(self._clock.monotonic() - self._anchor)
        if steps > 0:
            self._anchor += steps
            generation = self._generation
            for _ in range(steps):
                self._remaining = max(0, self._remaining - 1)
                self.tick.emit(self.snapshot())
                if generation != self._generation or self._status != TimerStatus.RUNNING:
                    return
                if self._remaining <= 0:
                    self._stop_ticking()
                    self._finish_phase()
                    return

        self._schedule_next()

    def _finish_phase(self) -> None:
        finished_phase = self._phase
        finished_cycle = self._cycle
        ends_cycle = (
            finished_phase == TimerPhase.BREAK or not self._config.has_break
        )
        generation = self._generation

        self._set_status(TimerStatus.COMPLETED)
        logger.info(
            "Timer %s phase complete (cycle %s/%s)",
            finished_phase.value, finished_cycle, self._config.total_cycles,
        )
        self.completed.emit({
            "phase": finished_phase,
            "cycle": finished_cycle,
            "cycle_completed": ends_cycle,
        })
        if generation != self._generation:
            return

        # ── work → break ──────────────────────────────────────────────
        if not ends_cycle:
            self._load_phase(TimerPhase.BREAK, self._config.break_seconds)
            self.phase_changed.emit({
                "from_phase": TimerPhase.WORK,
                "to_phase": TimerPhase.BREAK,
                "cycle": self._cycle,
            })
            self._maybe_auto_advance(generation)
            return

        # ── end of a cycle ────────────────────────────────────────────
        self.cycle_completed.emit({
            "cycle": finished_cycle,
            "total_cycles": self._config.total_cycles,
        })
        if generation != self._generation:
            return
        if finished_cycle >= self._config.total_cycles:
            return  # all cycles done; stay COMPLETED

        self._cycle = finished_cycle + 1
        self._load_phase(TimerPhase.WORK, self._work_seconds)
        if finished_phase == TimerPhase.BREAK:
            self.phase_changed.emit({
                "from_phase": TimerPhase.BREAK,
                "to_phase": TimerPhase.WORK,
                "cycle": self._cycle,
            })
        self._maybe_auto_advance(generation)

    def _maybe_auto_advance(self, generation: int) -> None:
        if not self._config.auto_advance or generation != self._generation:
            return
        if self._status != TimerStatus.IDLE:
            return
        self._begin_running()
        self.started.emit(self._control_payload())

    def _load_phase(self, phase: TimerPhase, seconds: int) -> None:
        self._phase = phase
        self._total = seconds
        self._remaining = seconds
        self._set_status(TimerStatus.IDLE)

    def _set_status(self, new_status: TimerStatus) -> None:
        self._status = new_status
        self.state_changed.emit(new_status)

    def _control_payload(self) -> dict:
        return {"phase": self._phase, "remaining_seconds": self._remaining}
