"""
Unit tests for TimerRepository.

Most tests run against a temporary SQLite file; the affected-row-count
invariant is exercised with a mock session since a unique id can never
match more than one row.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from exceptions.timer_errors import InvariantViolationError, StorageError, TimerNotFoundError
from models import Base
from models.timer import Timer, TimerDB
from repositories.timer_repository import TimerRepository

DAY_NS = 86_400_000_000_000


@pytest.fixture
def mock_session():
    """Create a mock database session"""
    session = MagicMock()
    session.query.return_value = session
    session.filter_by.return_value = session
    return session


class TestInsertAndGet:
    """Tests for insert and get_by_id"""

    def test_insert_assigns_id(self, repository):
        timer_id = repository.insert(Timer(name="Water plants", frequency_ns=3 * DAY_NS))
        assert isinstance(timer_id, int)
        assert timer_id > 0

    def test_insert_assigns_distinct_ids(self, repository):
        first = repository.insert(Timer(name="a"))
        second = repository.insert(Timer(name="b"))
        assert first != second

    def test_unset_last_completed_round_trips(self, repository, session):
        """A never-completed timer reads back as never completed, not as a sentinel date"""
        timer_id = repository.insert(Timer(name="Make Pizza", frequency_ns=60 * DAY_NS))

        stored = session.execute(text("SELECT lasttime FROM timer WHERE id = :id"), {"id": timer_id}).scalar_one()
        assert stored == ""
        assert repository.get_by_id(timer_id).last_completed is None

    def test_fields_round_trip(self, repository):
        last = datetime(2025, 1, 2, tzinfo=timezone(timedelta(hours=-5)))
        timer_id = repository.insert(
            Timer(name="Check Money", description="bank", last_completed=last, frequency_ns=30 * DAY_NS)
        )

        timer = repository.get_by_id(timer_id)

        assert timer.id == timer_id
        assert timer.name == "Check Money"
        assert timer.description == "bank"
        assert timer.last_completed == last
        assert timer.frequency_ns == 30 * DAY_NS

    def test_get_missing_raises_not_found(self, repository):
        with pytest.raises(TimerNotFoundError) as exc_info:
            repository.get_by_id(999999)
        assert exc_info.value.timer_id == 999999

    def test_deleted_ids_are_not_reused(self, repository):
        first = repository.insert(Timer(name="a"))
        repository.delete_by_id(first)

        assert repository.insert(Timer(name="b")) > first

    def test_unreadable_lasttime_is_storage_error(self, repository, session):
        session.add(TimerDB(name="broken", description="", last_completed="yesterday-ish", frequency=0))
        session.commit()

        with pytest.raises(StorageError):
            repository.list_all()


class TestListAll:
    """Tests for list_all"""

    def test_empty_store(self, repository):
        assert repository.list_all() == []

    def test_returns_insertion_order(self, repository, sample_timers):
        timers = repository.list_all()
        assert [t.name for t in timers] == ["Test Timer 1", "Test Timer 2"]

    def test_missing_table_is_storage_error(self, repository, engine):
        Base.metadata.drop_all(bind=engine)
        with pytest.raises(StorageError):
            repository.list_all()


class TestUpdateLastCompleted:
    """Tests for update_last_completed"""

    def test_updates_single_row(self, repository, sample_timers):
        when = datetime.now().astimezone()
        assert repository.update_last_completed(sample_timers[1].id, when) == 1
        assert repository.get_by_id(sample_timers[1].id).last_completed == when

    def test_missing_id_raises_not_found(self, repository):
        with pytest.raises(TimerNotFoundError):
            repository.update_last_completed(424242, datetime.now().astimezone())

    def test_multiple_rows_is_invariant_violation(self, mock_session):
        mock_session.update.return_value = 2
        repo = TimerRepository(mock_session)

        with pytest.raises(InvariantViolationError) as exc_info:
            repo.update_last_completed(1, datetime.now().astimezone())
        assert exc_info.value.affected == 2

    def test_statement_failure_rolls_back(self, mock_session):
        mock_session.update.side_effect = OperationalError("UPDATE", {}, Exception("disk I/O error"))
        repo = TimerRepository(mock_session)

        with pytest.raises(StorageError):
            repo.update_last_completed(1, datetime.now().astimezone())
        mock_session.rollback.assert_called_once()


class TestDeleteById:
    """Tests for delete_by_id"""

    def test_deletes_row(self, repository, sample_timers):
        assert repository.delete_by_id(sample_timers[0].id) == 1
        with pytest.raises(TimerNotFoundError):
            repository.get_by_id(sample_timers[0].id)

    def test_delete_is_not_idempotent(self, repository, sample_timers):
        repository.delete_by_id(sample_timers[0].id)
        with pytest.raises(TimerNotFoundError):
            repository.delete_by_id(sample_timers[0].id)

    def test_multiple_rows_is_invariant_violation(self, mock_session):
        mock_session.delete.return_value = 3
        repo = TimerRepository(mock_session)

        with pytest.raises(InvariantViolationError):
            repo.delete_by_id(1)
        mock_session.commit.assert_called_once()
