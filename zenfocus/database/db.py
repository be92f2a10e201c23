"""Database engine creation and transaction scope."""

from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession
from sqlalchemy.pool import StaticPool

from .models import Base

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "ZenFocus"
DB_PATH = APP_SUPPORT_DIR / "zenfocus.db"


# ── public API ────────────────────────────────────────────────────────────


def default_database_url() -> str:
    return f"sqlite:///{DB_PATH}"


def create_db_engine(url: str | None = None) -> Engine:
    """Create an engine for *url* (the on-disk database by default).

    ``sqlite:///:memory:`` gets a single shared connection so every ORM
    session sees the same tables; tests rely on this.
    """
    if url is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        url = default_database_url()

    kwargs: dict = {"echo": False}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def init_db(engine: Engine) -> None:
    """Create all tables.  Safe to run repeatedly."""
    Base.metadata.create_all(engine)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker):
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
