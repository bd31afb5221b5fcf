import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from models import Base, TimerDB

logger = logging.getLogger(__name__)

DAY_NS = 86_400_000_000_000
MONTH_NS = 30 * DAY_NS

SAMPLE_TIMERS = [
    ("Sandro Test", "", "2025-01-02T00:00:00-05:00", 0),
    ("Check Money", "", "2025-01-02T00:00:00-05:00", MONTH_NS),
    ("Go to gym", "", "2025-01-02T00:00:00-05:00", 3 * DAY_NS),
    ("Check on Mike", "", "2025-01-02T00:00:00-05:00", 2 * MONTH_NS),
    ("Start new coffee", "", "2025-01-02T00:00:00-05:00", DAY_NS),
    ("Make Pizza", "", "", 2 * MONTH_NS),
]


def get_database_url(db_file: str) -> str:
    return f"sqlite:///{db_file}"


def create_db_engine(db_file: str) -> Engine:
    """Create an engine for the SQLite file. Requests run on worker threads, so thread checks are off."""
    return create_engine(
        get_database_url(db_file),
        connect_args={"check_same_thread": False},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine, recreate: bool = False) -> None:
    """
    Create the timer table if it is missing.

    Args:
        engine: Bound engine
        recreate: Drop the table first, discarding all stored timers
    """
    if recreate:
        logger.warning("Dropping timer table at %s", engine.url)
        Base.metadata.drop_all(bind=engine, tables=[TimerDB.__table__])
    Base.metadata.create_all(bind=engine, tables=[TimerDB.__table__])
    logger.info("Timer table ready at %s", engine.url)


def populate_test_data(session_factory: sessionmaker) -> int:
    """
    Insert the sample timers.

    Returns:
        Number of rows inserted
    """
    with session_factory() as session:
        session.add_all(
            TimerDB(name=name, description=description, last_completed=lasttime, frequency=frequency)
            for name, description, lasttime, frequency in SAMPLE_TIMERS
        )
        session.commit()
    logger.info("Inserted %d sample timers", len(SAMPLE_TIMERS))
    return len(SAMPLE_TIMERS)
