"""
Relational Database

SQLAlchemy engine, session factory and declarative base.
Provides the get_db() dependency used by every router that touches storage.
"""

import logging
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from fertility_planner.config import settings

logger = logging.getLogger(__name__)


def _normalise_url(url: str) -> str:
    # Heroku-style URLs are not accepted by SQLAlchemy 2
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    # In-memory databases vanish with their connection, so share one
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


DATABASE_URL = _normalise_url(settings.DATABASE_URL)

engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

if engine.dialect.name == "sqlite":
    # pysqlite manages transactions itself and breaks SAVEPOINT; take over
    # BEGIN so nested transactions (timeline events) work.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    # Register the table classes on Base.metadata
    from fertility_planner.models import records  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (%s)", engine.url.render_as_string(hide_password=True))


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
