"""Durable storage of session records.

:class:`SessionStore` is the contract the session manager depends on;
:class:`SqlSessionStore` implements it on SQLAlchemy.  Storage is
update-by-id: saving a session with a known id overwrites the stored row.
Any database failure surfaces as :class:`~zenfocus.errors.PersistenceError`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Protocol

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import PersistenceError, ValidationError
from ..sessions.records import Session
from .db import make_session_factory, session_scope
from .models import SessionRow

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def save_session(self, session: Session) -> None: ...

    def get_session(self, session_id: str) -> Session | None: ...

    def get_sessions_by_user_id(self, user_id: str | None) -> list[Session]: ...


# ── row ⇄ record ──────────────────────────────────────────────────────────


def _row_to_session(row: SessionRow) -> Session:
    try:
        return Session(
            id=row.id,
            user_id=row.user_id,
            mode=row.mode,
            start_time=row.start_time,
            end_time=row.end_time,
            planned_duration=row.planned_duration,
            cycles=row.cycles,
            actual_duration=row.actual_duration,
            completed_fully=row.completed_fully,
            pause_count=row.pause_count,
            total_pause_time=row.total_pause_time,
            ambient_sound=row.ambient_sound,
            notes=row.notes,
        )
    except (ValueError, ValidationError) as exc:
        raise PersistenceError(
            f"Data corruption detected in session {row.id}: {exc}", cause=exc,
        ) from exc


def _copy_into(row: SessionRow, session: Session) -> None:
    row.user_id = session.user_id
    row.mode = session.mode.value
    row.start_time = session.start_time
    row.end_time = session.end_time
    row.planned_duration = session.planned_duration
    row.cycles = session.cycles
    row.actual_duration = session.actual_duration
    row.completed_fully = session.completed_fully
    row.pause_count = session.pause_count
    row.total_pause_time = session.total_pause_time
    row.ambient_sound = session.ambient_sound.value
    row.notes = session.notes


# ── SQL store ─────────────────────────────────────────────────────────────


class SqlSessionStore:
    """Session storage on any SQLAlchemy engine (SQLite by default)."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._factory = make_session_factory(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _transaction(self, action: str):
        try:
            with session_scope(self._factory) as db:
                yield db
        except SQLAlchemyError as exc:
            logger.exception("Database error while trying to %s", action)
            raise PersistenceError(f"Failed to {action}: {exc}", cause=exc) from exc

    def save_session(self, session: Session) -> None:
        with self._transaction(f"save session {session.id}") as db:
            row = db.get(SessionRow, session.id)
            if row is None:
                row = SessionRow(id=session.id)
                db.add(row)
            _copy_into(row, session)
        logger.debug("Saved %r", session)

    def get_session(self, session_id: str) -> Session | None:
        with self._transaction(f"load session {session_id}") as db:
            row = db.get(SessionRow, session_id)
            return _row_to_session(row) if row is not None else None

    def get_sessions_by_user_id(self, user_id: str | None) -> list[Session]:
        """All sessions of *user_id*, or of guests when it is None (or empty)."""
        user_id = user_id or None
        with self._transaction("load session history") as db:
            query = db.query(SessionRow)
            if user_id is None:
                query = query.filter(SessionRow.user_id.is_(None))
            else:
                query = query.filter(SessionRow.user_id == user_id)
            rows = query.order_by(SessionRow.start_time.desc()).all()
            return [_row_to_session(r) for r in rows]
