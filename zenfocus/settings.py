"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/ZenFocus/settings.json

Usage::

    settings = load_settings()
    settings.cache_ttl_seconds = 60
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path

from .database.db import APP_SUPPORT_DIR, default_database_url
from .modes import AmbientSound, SessionMode, preset_for
from .timer.engine import PhaseConfig

logger = logging.getLogger(__name__)

SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── storage ───────────────────────────────────────────────────────
    database_url: str | None = None        # None → on-disk default
    cache_ttl_seconds: int = 5 * 60

    # ── timer ─────────────────────────────────────────────────────────
    # per-mode overrides in seconds, keyed by mode value ("study", ...)
    work_durations: dict[str, int] = field(default_factory=dict)
    break_durations: dict[str, int] = field(default_factory=dict)
    auto_start_breaks: bool = False

    # ── session defaults ──────────────────────────────────────────────
    default_mode: str = SessionMode.STUDY.value
    default_ambient_sound: str = AmbientSound.SILENCE.value

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"

    def resolved_database_url(self) -> str:
        return self.database_url or default_database_url()

    def work_duration(self, mode: SessionMode | str) -> int:
        """Work seconds for *mode*: the user's override or the preset.

        Overrides are ignored for modes that are not customizable.
        """
        preset = preset_for(mode)
        if not preset.customizable:
            return preset.work_seconds
        seconds = self.work_durations.get(preset.mode.value, preset.work_seconds)
        if preset.max_work_seconds is not None:
            seconds = min(seconds, preset.max_work_seconds)
        return max(1, seconds)

    def break_duration(self, mode: SessionMode | str) -> int:
        preset = preset_for(mode)
        if not preset.customizable:
            return preset.break_seconds
        seconds = self.break_durations.get(preset.mode.value, preset.break_seconds)
        if preset.max_break_seconds is not None:
            seconds = min(seconds, preset.max_break_seconds)
        return max(0, seconds)

    def phase_config(self, mode: SessionMode, cycles: int = 1) -> PhaseConfig:
        return PhaseConfig(
            break_seconds=self.break_duration(mode),
            total_cycles=cycles,
            auto_advance=self.auto_start_breaks or cycles > 1,
        )


def load_settings(path: Path = SETTINGS_PATH) -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        # Only use keys that exist in the dataclass
        valid_keys = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return Settings()


def save_settings(settings: Settings, path: Path = SETTINGS_PATH) -> None:
    """Write settings to disk as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
