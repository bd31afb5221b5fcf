"""
Repository for the timer table.

Every write is a single statement committed on its own; id-scoped writes
check the affected row count against the one-row-per-id invariant.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from exceptions.timer_errors import InvariantViolationError, StorageError, TimerNotFoundError
from models.timer import Timer, TimerDB
from utils.date_util import format_timestamp

logger = logging.getLogger(__name__)


class TimerRepository:
    """Repository for timer CRUD operations."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Timer]:
        """
        Get every timer, in insertion order.

        Raises:
            StorageError: On query failure or an unreadable row
        """
        try:
            records = self.db.query(TimerDB).order_by(TimerDB.id).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Error listing timers: {e}") from e
        return [self._to_timer(record) for record in records]

    def get_by_id(self, timer_id: int) -> Timer:
        """
        Get a single timer.

        Raises:
            TimerNotFoundError: If no row has this id
            StorageError: On query failure or an unreadable row
        """
        try:
            record = self.db.query(TimerDB).filter_by(id=timer_id).first()
        except SQLAlchemyError as e:
            raise StorageError(f"Error reading timer {timer_id}: {e}") from e

        if record is None:
            raise TimerNotFoundError(timer_id)
        return self._to_timer(record)

    def insert(self, timer: Timer) -> int:
        """
        Persist a new timer. Any id already set on `timer` is ignored.

        Returns:
            The id assigned by storage
        """
        record = timer.to_record()
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Error inserting timer: {e}") from e
        return record.id

    def update_last_completed(self, timer_id: int, completed_at: datetime) -> int:
        """
        Set when a timer was last completed.

        Returns:
            Number of rows updated (always 1 on success)

        Raises:
            TimerNotFoundError: If no row has this id
            InvariantViolationError: If more than one row was updated
        """
        try:
            affected = (
                self.db.query(TimerDB)
                .filter_by(id=timer_id)
                .update({TimerDB.last_completed: format_timestamp(completed_at)}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Error resetting timer {timer_id}: {e}") from e

        return self._check_affected(timer_id, affected, "reset")

    def delete_by_id(self, timer_id: int) -> int:
        """
        Delete a timer. Deleting an id that does not exist is an error, not a no-op.

        Returns:
            Number of rows deleted (always 1 on success)

        Raises:
            TimerNotFoundError: If no row has this id
            InvariantViolationError: If more than one row was deleted
        """
        try:
            affected = (
                self.db.query(TimerDB)
                .filter_by(id=timer_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Error deleting timer {timer_id}: {e}") from e

        return self._check_affected(timer_id, affected, "delete")

    @staticmethod
    def _check_affected(timer_id: int, affected: int, operation: str) -> int:
        if affected == 0:
            raise TimerNotFoundError(timer_id)
        if affected > 1:
            raise InvariantViolationError(operation, affected)
        return affected

    @staticmethod
    def _to_timer(record: TimerDB) -> Timer:
        try:
            return Timer.from_record(record)
        except ValueError as e:
            raise StorageError(f"Timer {record.id} has unreadable data: {e}") from e
