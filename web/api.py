"""
FastAPI application for the countdown web UI.

Every mutation returns an HTML fragment (or an empty body plus an HX-Trigger
header) that htmx swaps into the page.
"""

import logging
import re
from typing import Iterator

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from sqlalchemy.orm import Session, sessionmaker

from exceptions.timer_errors import InvariantViolationError, TimerError, TimerValidationError
from models.timer import Timer
from repositories.timer_repository import TimerRepository
from utils.date_util import local_now, nanoseconds_to_timedelta, parse_local_datetime
from web.rendering import render_home, render_timer

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

# Ids and frequencies are stored as signed 64-bit SQLite integers
MIN_INT64 = -(2**63)
MAX_INT64 = 2**63 - 1
MAX_FREQUENCY_NS = MAX_INT64

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int(value: str, field: str) -> int:
    """
    Parse an optionally signed run of ASCII digits.

    Looser forms Python's int() would take (whitespace, underscores, other
    digit scripts) are rejected, as is anything outside the signed 64-bit range.

    Raises:
        TimerValidationError: If the value is not a 64-bit integer
    """
    if value is None or not _INTEGER_PATTERN.fullmatch(value):
        raise TimerValidationError(f"Error parsing {field}: invalid integer {value!r}")
    parsed = int(value)
    if parsed < MIN_INT64 or parsed > MAX_INT64:
        raise TimerValidationError(f"Error parsing {field}: {value} is out of range")
    return parsed


def timer_trigger(timer_id: int) -> str:
    """Client-side event name that makes the matching fragment re-fetch itself."""
    return f"timerUpdate/{timer_id}"


def create_app(session_factory: sessionmaker) -> FastAPI:
    """
    Create the FastAPI countdown application.

    Args:
        session_factory: SQLAlchemy sessionmaker bound to the timer database

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Countdown",
        description="Recurring task tracker",
        version=APP_VERSION,
    )

    def get_repository() -> Iterator[TimerRepository]:
        session: Session = session_factory()
        try:
            yield TimerRepository(session)
        finally:
            session.close()

    @app.exception_handler(TimerError)
    async def handle_timer_error(request: Request, exc: TimerError) -> PlainTextResponse:
        status_code = int(exc.status_code)
        if isinstance(exc, InvariantViolationError):
            logger.critical(
                "%d Response for Request: %s %s, %s", status_code, request.method, request.url, exc
            )
        elif status_code >= 500:
            logger.error(
                "%d Response for Request: %s %s, %s", status_code, request.method, request.url, exc
            )
        return PlainTextResponse(f"{exc}\n", status_code=status_code)

    @app.get("/", response_class=HTMLResponse)
    def list_timers(repo: TimerRepository = Depends(get_repository)) -> HTMLResponse:
        """Full page with every timer."""
        timers = repo.list_all()
        return HTMLResponse(render_home(timers))

    @app.get("/timer/{timer_id}", response_class=HTMLResponse)
    def get_timer(timer_id: str, repo: TimerRepository = Depends(get_repository)) -> HTMLResponse:
        """Fragment for one timer; htmx re-fetches this after a reset."""
        timer = repo.get_by_id(parse_int(timer_id, "id"))
        return HTMLResponse(render_timer(timer))

    @app.post("/timer", response_class=HTMLResponse)
    def create_timer(
        name: str = Form(""),
        description: str = Form(""),
        lasttime: str = Form(""),
        frequencyValue: str = Form(""),
        frequencyUnit: str = Form(""),
        repo: TimerRepository = Depends(get_repository),
    ) -> HTMLResponse:
        """
        Create a timer from the creation form and return its fragment.

        `lasttime` comes from a datetime-local input and is read as server-local time.
        The frequency is `frequencyValue` units of `frequencyUnit` nanoseconds.
        """
        if not name.strip():
            raise TimerValidationError("Error parsing form: 'name' must not be empty")

        try:
            last_completed = parse_local_datetime(lasttime)
        except (ValueError, OverflowError) as e:
            raise TimerValidationError(f"Error parsing form field 'lasttime': {e}") from e

        frequency_value = parse_int(frequencyValue, "frequency value")
        frequency_unit = parse_int(frequencyUnit, "frequency unit")
        frequency_ns = frequency_value * frequency_unit
        if frequency_ns < 0 or frequency_ns > MAX_FREQUENCY_NS:
            raise TimerValidationError(f"Error parsing frequency: {frequency_ns} is out of range")

        try:
            last_completed + nanoseconds_to_timedelta(frequency_ns)
        except OverflowError as e:
            raise TimerValidationError("Error parsing form: next due date is past the end of the calendar") from e

        timer = Timer(
            name=name,
            description=description,
            last_completed=last_completed,
            frequency_ns=frequency_ns,
        )
        timer.id = repo.insert(timer)
        logger.info("Created timer %d (%s)", timer.id, timer.name)

        return HTMLResponse(render_timer(timer))

    @app.post("/timer/{timer_id}/reset")
    def reset_timer(timer_id: str, repo: TimerRepository = Depends(get_repository)) -> Response:
        """Mark a timer as done now. The HX-Trigger header tells its fragment to refresh."""
        parsed_id = parse_int(timer_id, "id")
        repo.update_last_completed(parsed_id, local_now())
        logger.info("Reset timer %d", parsed_id)
        return Response(status_code=200, headers={"HX-Trigger": timer_trigger(parsed_id)})

    @app.delete("/timer/{timer_id}")
    def delete_timer(timer_id: str, repo: TimerRepository = Depends(get_repository)) -> Response:
        """Delete a timer; htmx removes the fragment client-side."""
        parsed_id = parse_int(timer_id, "id")
        repo.delete_by_id(parsed_id)
        logger.info("Deleted timer %d", parsed_id)
        return Response(status_code=200)

    return app
