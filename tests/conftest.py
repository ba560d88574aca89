"""Shared test configuration and fixtures."""

import logging
from contextlib import contextmanager
from datetime import datetime

import pytest
import structlog
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import get_settings
from database.base import Base
from database.models import Publication, ServiceTerm

FORECAST_TABLE = (
    "<table><tr><td>Main Economic Indicators and Market Forecasts</td></tr>"
    '<tr><td class="x"><span>42</span>%</td></tr></table>'
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test sees settings rebuilt from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_logging():
    """Undo configure_logging() side effects (root handlers, structlog config)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def session_factory():
    """In-memory SQLite session factory with the content schema created."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    @contextmanager
    def factory():
        session = Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    yield factory
    engine.dispose()


@pytest.fixture
def seeded_factory(session_factory):
    """Content DB with weekly publications across wanted and unwanted services."""
    with session_factory() as db:
        us = ServiceTerm(id=1, name="US Economics Weekly")
        uk = ServiceTerm(id=2, name="UK Economics Weekly")
        other = ServiceTerm(id=3, name="Asia Daily")
        db.add_all([us, uk, other])
        db.add_all([
            Publication(id=30, type="publication", title="US weekly 2", status=1,
                        published_at=datetime(2025, 3, 21, 14, 0), body=FORECAST_TABLE, service=us),
            Publication(id=10, type="publication", title="US weekly 1", status=1,
                        published_at=datetime(2025, 3, 14, 9, 30), body=FORECAST_TABLE, service=us),
            Publication(id=20, type="publication", title="UK weekly", status=1,
                        published_at=None, body=None, service=uk),
            Publication(id=40, type="publication", title="Unpublished", status=0,
                        body=FORECAST_TABLE, service=us),
            Publication(id=50, type="publication", title="Asia", status=1,
                        body=FORECAST_TABLE, service=other),
            Publication(id=60, type="page", title="About", status=1,
                        body=FORECAST_TABLE, service=us),
        ])
    return session_factory
