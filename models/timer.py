"""
Timer model: a recurring task with a name, description, last completion time
and recurrence frequency.

Two shapes live here:
- TimerDB: the SQLAlchemy row. `lasttime` is stored as text, "" meaning never completed,
  and `frequency` as an integer nanosecond count.
- Timer: the pydantic model handlers and templates work with.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy import Column, Integer, Text

from models import Base
from utils.date_util import format_timestamp, nanoseconds_to_timedelta, next_due, parse_timestamp


class TimerDB(Base):
    """SQLAlchemy model for the timer table"""

    __tablename__ = "timer"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    last_completed = Column("lasttime", Text, nullable=False, default="")
    frequency = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<TimerDB(id={self.id}, name={self.name!r})>"


class Timer(BaseModel):
    """A recurring task as seen by handlers and templates"""

    id: Optional[int] = Field(default=None, description="Storage-assigned identifier; None until inserted")
    name: str = Field(..., min_length=1, description="Display name")
    description: str = Field(default="", description="Free-form notes, may be empty")
    last_completed: Optional[datetime] = Field(default=None, description="When it was last done; None if never")
    frequency_ns: int = Field(default=0, ge=0, description="Recurrence period in nanoseconds; 0 means no recurrence")

    @property
    def frequency(self) -> timedelta:
        return nanoseconds_to_timedelta(self.frequency_ns)

    def next_due(self, now: datetime) -> datetime:
        return next_due(self, now)

    @classmethod
    def from_record(cls, record: TimerDB) -> "Timer":
        """
        Build a Timer from a database row.

        Raises:
            ValueError: If the stored lasttime is not a valid timestamp
        """
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            last_completed=parse_timestamp(record.last_completed),
            frequency_ns=record.frequency,
        )

    def to_record(self) -> TimerDB:
        """Build a new (not yet persisted) database row. The id is left for storage to assign."""
        return TimerDB(
            name=self.name,
            description=self.description,
            last_completed=format_timestamp(self.last_completed),
            frequency=self.frequency_ns,
        )
