"""Engine and session factory for the record store database."""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fleettrack.adapters.outbound.sqlalchemy_models import Base

_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_DATABASE_URL = "sqlite:///data/fleettrack.db"
_IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def resolve_database_url(url: str | None = None) -> str:
    """Explicit url, else ``DATABASE_URL``, else the bundled SQLite file.

    Relative SQLite paths are taken from the project root and their
    directory is created.
    """
    db_url = url or os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL
    if db_url in _IN_MEMORY_URLS or not db_url.startswith("sqlite:///"):
        return db_url
    path = db_url[len("sqlite:///"):]
    if os.path.isabs(path):
        return db_url
    path = os.path.join(_ROOT_DIR, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return f"sqlite:///{path}"


def get_engine(url: str | None = None):
    db_url = resolve_database_url(url)
    if db_url in _IN_MEMORY_URLS:
        # One shared connection, otherwise each session sees an empty database
        return create_engine(
            db_url, connect_args={"check_same_thread": False}, poolclass=StaticPool,
        )
    return create_engine(db_url)


def init_db(engine=None):
    """Create the ``enregistrements`` and ``activity_logs`` tables if missing."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    return engine


def get_session(engine=None) -> Session:
    return sessionmaker(bind=engine or get_engine(), expire_on_commit=False)()
