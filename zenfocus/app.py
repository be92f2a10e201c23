"""Wiring of the ZenFocus core.

:class:`ZenFocusCore` builds the database engine, session store, timer
engine and session manager once, from :class:`~zenfocus.settings.Settings`.
The UI constructs one at start-up and hands its parts to the widgets that
need them; nothing here is a module-level global.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject

from .clock import Clock
from .database.db import create_db_engine, init_db
from .database.store import SqlSessionStore
from .modes import AmbientSound, SessionMode
from .sessions.manager import SessionManager
from .sessions.records import SessionConfig, validate_config
from .settings import Settings
from .timer.engine import TimerEngine

logger = logging.getLogger(__name__)


class ZenFocusCore:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        clock: Clock | None = None,
        parent: QObject | None = None,
    ) -> None:
        self.settings = settings or Settings()

        self.db_engine = create_db_engine(self.settings.resolved_database_url())
        init_db(self.db_engine)
        self.store = SqlSessionStore(self.db_engine)

        self.timer = TimerEngine(parent, clock=clock)
        self.manager = SessionManager(
            self.timer,
            self.store,
            parent,
            clock=clock,
            cache_ttl=self.settings.cache_ttl_seconds,
            phase_config_factory=self.settings.phase_config,
        )
        logger.debug("ZenFocus core ready (%s)", self.db_engine.url)

    def default_config(
        self,
        mode: SessionMode | str | None = None,
        ambient_sound: AmbientSound | str | None = None,
        cycles: int | None = None,
    ) -> SessionConfig:
        """A session config using the user's defaults for anything not given."""
        mode = SessionMode.parse(mode or self.settings.default_mode)
        return validate_config({
            "mode": mode,
            "planned_duration": self.settings.work_duration(mode),
            "ambient_sound": ambient_sound or self.settings.default_ambient_sound,
            "cycles": cycles,
        })

    def shutdown(self) -> None:
        self.manager.shutdown()
        self.db_engine.dispose()
