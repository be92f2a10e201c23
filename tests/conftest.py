"""Shared pytest fixtures for ZenFocus tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from zenfocus.database.db import create_db_engine, init_db
from zenfocus.database.store import SqlSessionStore
from zenfocus.sessions.manager import SessionManager
from zenfocus.timer.engine import TimerEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db_engine():
    """A fresh in-memory SQLite database per test."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(db_engine):
    return SqlSessionStore(db_engine)


@pytest.fixture
def timer(qapp, clock):
    """Fresh TimerEngine on the fake clock."""
    return TimerEngine(parent=None, clock=clock)


@pytest.fixture
def manager(timer, store, clock):
    """SessionManager wired to the timer and the in-memory store."""
    mgr = SessionManager(timer, store, clock=clock)
    yield mgr
    mgr.shutdown()
