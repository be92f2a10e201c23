"""Session records and the pure functions that build them.

A :class:`Session` is one attempt at a focus interval.  It is created when
the user picks a mode and duration, and completed exactly once (fully or
cancelled).  Records are frozen; completing one returns a new record.

All durations are whole seconds.  ``planned_duration`` is the length of
one round; a session runs ``cycles`` rounds.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from ..clock import Clock, SYSTEM_CLOCK
from ..errors import ValidationError
from ..modes import AmbientSound, SessionMode, preset_for

NOTES_MAX_LENGTH = 500


def _parse_mode(value: Any) -> SessionMode:
    try:
        return SessionMode.parse(value)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


# ── input payloads ────────────────────────────────────────────────────────


class SessionConfig(BaseModel):
    """What the user chose before starting.

    ``cycles`` is the number of back-to-back rounds; left out, it comes
    from the mode preset.
    """

    model_config = ConfigDict(frozen=True)

    mode: SessionMode
    planned_duration: int = Field(ge=1)
    ambient_sound: AmbientSound = AmbientSound.SILENCE
    cycles: int | None = Field(default=None, ge=1)

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, value: Any) -> SessionMode:
        return _parse_mode(value)


class SessionCompletion(BaseModel):
    model_config = ConfigDict(frozen=True)

    actual_duration: int = Field(ge=0)
    completed_fully: bool
    pause_count: int = Field(default=0, ge=0)
    total_pause_time: int = Field(default=0, ge=0)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)


# ── record ────────────────────────────────────────────────────────────────


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str | None = None
    mode: SessionMode
    start_time: datetime
    end_time: datetime
    planned_duration: int = Field(ge=1)
    cycles: int = Field(default=1, ge=1)
    actual_duration: int = Field(default=0, ge=0)
    completed_fully: bool = False
    pause_count: int = Field(default=0, ge=0)
    total_pause_time: int = Field(default=0, ge=0)
    ambient_sound: AmbientSound = AmbientSound.SILENCE
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, value: Any) -> SessionMode:
        return _parse_mode(value)

    @model_validator(mode="after")
    def check_end_after_start(self) -> "Session":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def planned_total(self) -> int:
        """Planned seconds over all rounds."""
        return self.planned_duration * self.cycles

    @property
    def planned_minutes(self) -> int:
        return math.ceil(self.planned_duration / 60)

    @property
    def actual_minutes(self) -> int:
        return math.ceil(self.actual_duration / 60)

    def __repr__(self) -> str:
        return (
            f"<Session id={self.id} mode={self.mode.value} "
            f"completed={self.completed_fully}>"
        )


# ── builders ──────────────────────────────────────────────────────────────


def _validate(model: type[BaseModel], data: Any, what: str):
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or what}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(f"Invalid {what}: {problems}") from exc


def validate_config(config: SessionConfig | Mapping[str, Any]) -> SessionConfig:
    return _validate(SessionConfig, config, "session configuration")


def validate_completion(
    completion: SessionCompletion | Mapping[str, Any],
) -> SessionCompletion:
    return _validate(SessionCompletion, completion, "completion data")


def create_session(
    config: SessionConfig | Mapping[str, Any],
    user_id: str | None = None,
    *,
    clock: Clock | None = None,
) -> Session:
    """Build a fresh, unfinished session stamped with the current time."""
    config = validate_config(config)
    now = (clock or SYSTEM_CLOCK).now()
    return Session(
        id=str(uuid.uuid4()),
        user_id=user_id or None,
        mode=config.mode,
        start_time=now,
        end_time=now,
        planned_duration=config.planned_duration,
        cycles=config.cycles or preset_for(config.mode).cycles,
        ambient_sound=config.ambient_sound,
    )


def complete_session(
    session: Session,
    completion: SessionCompletion | Mapping[str, Any],
    *,
    clock: Clock | None = None,
) -> Session:
    """Return a copy of *session* with the end time and completion data set."""
    completion = validate_completion(completion)
    now = (clock or SYSTEM_CLOCK).now()
    return session.model_copy(update={
        "end_time": max(now, session.start_time),
        "actual_duration": completion.actual_duration,
        "completed_fully": completion.completed_fully,
        "pause_count": completion.pause_count,
        "total_pause_time": completion.total_pause_time,
        "notes": completion.notes,
    })


def efficiency(session: Session) -> float:
    """Actual over planned duration (all rounds) as a percentage, capped at 100."""
    if session.planned_total <= 0:
        return 0.0
    return min(100.0, session.actual_duration / session.planned_total * 100)


def duration_from_timestamps(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded up.

    Any positive span shorter than a minute counts as 1; zero or negative
    spans are 0.
    """
    minutes = (end - start).total_seconds() / 60
    if minutes <= 0:
        return 0
    if minutes < 1:
        return 1
    return math.ceil(minutes)


def is_guest(session: Session) -> bool:
    return session.user_id is None
