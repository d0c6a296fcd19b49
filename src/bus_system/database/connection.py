"""Database configuration and connection setup.

The SQLModel engine is created lazily, after application settings have been
loaded and possibly overridden by CLI flags. This prevents premature failure
on import when ``BUS_SYSTEM_DATABASE_URL`` is not yet set.
"""

from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager
from typing import Any

from loguru import logger
from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine, text
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bus_system.settings import get_settings

# Zero-argument callable yielding a fresh session, e.g. ``borrow_db_session``
SessionFactory = Callable[[], AbstractContextManager[Session]]

_engine: Engine | None = None


def _engine_options(database_url: str) -> dict[str, Any]:
    """Return engine keyword arguments suited to the database backend."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "connect_args": {"connect_timeout": 10},
    }


def _build_engine() -> Engine:
    """Create and return a new engine from current settings.

    Raises:
        ValueError: if database URL not configured.
    """
    settings = get_settings()
    database_url = settings.database_url
    if not database_url:
        raise ValueError("Database URL missing: provide BUS_SYSTEM_DATABASE_URL env or --database-url CLI argument")
    engine_local = create_engine(database_url, echo=settings.sql_log, **_engine_options(database_url))
    logger.info("SQL echo is {}", "enabled" if settings.sql_log else "disabled")
    return engine_local


def get_engine() -> Engine:
    """Return a singleton engine instance, creating it lazily."""
    global _engine
    if _engine is None:
        _engine = _build_engine()
    return _engine


def is_initialized() -> bool:
    """Check if database already initialized"""
    return _engine is not None


def create_all_tables() -> None:
    """Create all tables known to the SQLModel metadata that do not exist yet."""
    # Table models must be imported so they are registered on the metadata
    from bus_system.models import db_model  # noqa: F401

    logger.info("Creating missing database tables")
    SQLModel.metadata.create_all(get_engine())


def dispose_db() -> None:
    """Dispose of the database engine if it was created."""
    global _engine
    if _engine is not None:
        logger.info("Closing database connections")
        _engine.dispose()
        _engine = None


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
    retry=retry_if_exception_type(Exception),
    before_sleep=before_sleep_log(logger, "DEBUG"),
)
def _create_session() -> Session:
    """Create a database session with retry logic.

    The engine is disposed and recreated on each failed attempt, which covers
    a database that was not ready when the engine was first built.

    Returns:
        Session: A new database session

    Raises:
        Exception: If all retry attempts fail
    """
    global _engine
    try:
        session = Session(get_engine())
        # Test the connection immediately
        session.execute(text("SELECT 1"))
        return session
    except Exception as e:
        if _engine is not None:
            logger.warning("Database connection failed, disposing engine for retry...")
            _engine.dispose()
            _engine = None
        logger.error("Failed to create database session: {}", e)
        raise


@contextmanager
def borrow_db_session() -> Generator[Session]:
    """Context manager yielding a fresh database session.

    Use this for event handlers, CLI commands, or any non-FastAPI context.
    For FastAPI route handlers, use ``get_db_session()`` as a dependency.

    Example:
        from bus_system.database import borrow_db_session
        with borrow_db_session() as session:
            session.exec(text("SELECT 1"))
    """
    session = _create_session()
    session_id = id(session)

    try:
        yield session
    except Exception as e:  # noqa: BLE001
        logger.error("Error during database session {}: {}", session_id, e)
        raise
    finally:
        session.close()
        logger.trace("Database session {} closed and resources released", session_id)


def get_db_session() -> Generator[Session]:
    """FastAPI dependency yielding a database session.

    Usage in route:
        def endpoint(session: Session = Depends(get_db_session)): ...
    """
    with borrow_db_session() as session:
        yield session


def is_healthy(session: Session) -> dict[str, Any]:
    """Check if the database connection is healthy.

    Args:
        session: The database session to use for the health check.

    Returns:
        A dictionary containing the database health status and connection info.
    """
    try:
        session.exec(text("SELECT 1")).one()
        return {"status": "healthy", "connection": "active"}
    except Exception as e:  # noqa: BLE001
        logger.error("Database health check failed: {}", e)
        return {"status": "unhealthy", "error": str(e), "connection": "failed"}
