"""Database session factory and configuration.

Provides database connectivity and session management for the HRM backend.
The retention job opens one session per run; every purge, update and delete
it performs is committed on its own, so no transaction spans the whole run.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create an engine with the pool settings appropriate for the URL.

    Pool settings only apply to PostgreSQL (not SQLite). SQLite connections
    get foreign key enforcement switched on so RESTRICT constraints behave
    the same as on PostgreSQL.
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,  # Set to True for SQL query logging
    }

    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    engine = create_engine(database_url, **engine_kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker:
    """Build a session factory bound to a dedicated engine.

    Used by the CLI when --database-url overrides the configured store.
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=build_engine(database_url),
    )


engine = build_engine(get_settings().DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session scope for one unit of background work.

    Usage:
        with get_db_session() as db:
            run_retention_cleanup(db)

    Commits whatever is still pending on success, rolls back pending work on
    exception and always closes. Work the retention job has already committed
    step by step is not affected by the rollback.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
