from sqlalchemy.orm import declarative_base

Base = declarative_base()

from .timer import Timer, TimerDB  # noqa: E402

__all__ = ["Base", "Timer", "TimerDB"]
