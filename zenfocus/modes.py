"""Timer modes and their presets.

Each mode governs a default work duration and whether a break follows it.
Zen and interval modes have no break phase; interval mode is meant to be
run as several back-to-back cycles (the "repeat" timer).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import ValidationError
from .timer.engine import PhaseConfig


class SessionMode(str, Enum):
    STUDY = "study"
    DEEPWORK = "deepwork"
    YOGA = "yoga"
    ZEN = "zen"
    INTERVAL = "interval"

    @classmethod
    def parse(cls, value: "SessionMode | str") -> "SessionMode":
        """Accept a mode or any of its names (``work``, ``meditation``...)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _MODE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            names = ", ".join(m.value for m in cls)
            raise ValidationError(
                f"Session mode must be one of: {names} (got {value!r})"
            ) from None


class AmbientSound(str, Enum):
    RAIN = "rain"
    FOREST = "forest"
    OCEAN = "ocean"
    SILENCE = "silence"


_MODE_ALIASES: dict[str, str] = {
    "work": "deepwork",
    "deep_work": "deepwork",
    "deep-work": "deepwork",
    "meditation": "zen",
    "repeat": "interval",
}


@dataclass(frozen=True)
class ModePreset:
    mode: SessionMode
    label: str
    description: str
    work_seconds: int
    break_seconds: int
    customizable: bool = True
    max_work_seconds: int | None = None
    max_break_seconds: int | None = None
    cycles: int = 1

    @property
    def has_break(self) -> bool:
        return self.break_seconds > 0


# ── presets ──────────────────────────────────────────────────────────────

PRESETS: dict[SessionMode, ModePreset] = {
    SessionMode.STUDY: ModePreset(
        SessionMode.STUDY, "Study", "Focus timer for deep study sessions",
        work_seconds=25 * 60, break_seconds=5 * 60,
        max_work_seconds=120 * 60, max_break_seconds=30 * 60,
    ),
    SessionMode.DEEPWORK: ModePreset(
        SessionMode.DEEPWORK, "Deep Work", "Extended focus for complex tasks",
        work_seconds=60 * 60, break_seconds=10 * 60,
        max_work_seconds=180 * 60, max_break_seconds=30 * 60,
    ),
    SessionMode.YOGA: ModePreset(
        SessionMode.YOGA, "Yoga", "Mindful timer for yoga practice",
        work_seconds=30 * 60, break_seconds=5 * 60,
        customizable=False,
    ),
    SessionMode.ZEN: ModePreset(
        SessionMode.ZEN, "Meditation", "Calm timer for meditation practice",
        work_seconds=10 * 60, break_seconds=0,
        customizable=False,
    ),
    SessionMode.INTERVAL: ModePreset(
        SessionMode.INTERVAL, "Repeat", "Back-to-back rounds of one duration",
        work_seconds=5 * 60, break_seconds=0,
        max_break_seconds=30 * 60, cycles=4,
    ),
}


def preset_for(mode: SessionMode | str) -> ModePreset:
    return PRESETS[SessionMode.parse(mode)]


def list_presets() -> list[ModePreset]:
    """All presets in display order."""
    return [PRESETS[m] for m in SessionMode]


def phase_config_for(
    mode: SessionMode | str,
    cycles: int = 1,
    *,
    auto_advance: bool = False,
) -> PhaseConfig:
    """Build the engine's phase configuration for *mode*.

    Rounds of a multi-cycle run always follow each other without waiting
    for a start.
    """
    preset = preset_for(mode)
    return PhaseConfig(
        break_seconds=preset.break_seconds,
        total_cycles=cycles,
        auto_advance=auto_advance or cycles > 1,
    )
