from .timer_errors import (
    InvariantViolationError,
    RenderError,
    StorageError,
    TimerError,
    TimerNotFoundError,
    TimerValidationError,
)

__all__ = [
    "InvariantViolationError",
    "RenderError",
    "StorageError",
    "TimerError",
    "TimerNotFoundError",
    "TimerValidationError",
]
