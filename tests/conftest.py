"""Shared fixtures: in-memory database, fresh registry and event bus, log capture."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import pytest
from loguru import logger
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from bus_system.event_bus import EventBus
from bus_system.models import db_model  # noqa: F401
from bus_system.services.registry import ServiceRegistry


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def session_factory(engine):
    """Zero-argument callable returning a fresh session context, like ``borrow_db_session``."""

    @contextmanager
    def factory() -> Generator[Session]:
        with Session(engine) as session:
            yield session

    return factory


@pytest.fixture
def registry() -> ServiceRegistry:
    return ServiceRegistry()


@pytest.fixture
def event_bus(registry) -> EventBus:
    return EventBus(registry)


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(handler_id)
