"""Shared test helpers for ZenFocus."""

from datetime import datetime, timedelta

from zenfocus.timer.engine import TimerEngine


class FakeClock:
    """Manually advanced clock; wall and monotonic time move together."""

    def __init__(self, start: datetime = datetime(2026, 3, 2, 9, 0, 0)):
        self._wall = start
        self._mono = 1000.0

    def now(self) -> datetime:
        return self._wall

    def monotonic(self) -> float:
        return self._mono

    def advance(self, seconds: float) -> None:
        self._wall += timedelta(seconds=seconds)
        self._mono += seconds


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_seconds(timer: TimerEngine, clock: FakeClock, seconds: int) -> None:
    """Let *seconds* of wall time pass, one timer callback per second."""
    for _ in range(seconds):
        clock.advance(1)
        timer._on_tick()


def run_phase(timer: TimerEngine, clock: FakeClock) -> None:
    """Count the current phase down to zero."""
    run_seconds(timer, clock, timer.remaining)
