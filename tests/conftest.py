"""
Shared fixtures: a throwaway SQLite file per test, the app bound to it,
and a TestClient.
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from db import create_db_engine, create_session_factory, init_db
from models.timer import Timer
from repositories.timer_repository import TimerRepository
from web.api import create_app

DAY_NS = 86_400_000_000_000


@pytest.fixture
def engine(tmp_path):
    """Engine on an empty, schema-initialized database file"""
    engine = create_db_engine(str(tmp_path / "test-timers.db"))
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repository(session):
    return TimerRepository(session)


@pytest.fixture
def client(session_factory):
    """Test client for an app backed by the temporary database"""
    return TestClient(create_app(session_factory))


@pytest.fixture
def sample_timers(repository):
    """Two stored timers: one completed yesterday, one never completed"""
    yesterday = datetime.now().astimezone() - timedelta(days=1)
    timers = [
        Timer(
            name="Test Timer 1",
            description="First test timer",
            last_completed=yesterday,
            frequency_ns=DAY_NS,
        ),
        Timer(
            name="Test Timer 2",
            description="Second test timer",
            last_completed=None,
            frequency_ns=7 * DAY_NS,
        ),
    ]
    for timer in timers:
        timer.id = repository.insert(timer)
    return timers
