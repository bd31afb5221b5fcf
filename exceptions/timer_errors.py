from http import HTTPStatus


class TimerError(Exception):
    """Base error for timer operations. Carries the HTTP status it maps to."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class TimerValidationError(TimerError):
    status_code = HTTPStatus.BAD_REQUEST


class TimerNotFoundError(TimerError):
    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, timer_id: int):
        self.timer_id = timer_id
        super().__init__(f"No timer with id: {timer_id}")


class StorageError(TimerError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class RenderError(StorageError):
    pass


class InvariantViolationError(TimerError):
    """More rows were touched by an id-scoped write than the schema allows."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, operation: str, affected: int):
        self.operation = operation
        self.affected = affected
        super().__init__(
            f"Expected only 1 row to be affected by {operation}, but instead {affected} were"
        )
