"""
HTML rendering for timers.

Templates render to a complete string before anything is handed to the
response, so a failing template never leaks partial markup to the client.
"""

import os
from datetime import datetime
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from exceptions.timer_errors import RenderError
from models.timer import Timer
from utils.date_util import local_now, rfc3339

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

# Unit choices offered by the creation form, as nanoseconds per unit
FREQUENCY_UNITS = [
    ("Days", 86_400_000_000_000),
    ("Weeks", 604_800_000_000_000),
    ("Months", 2_592_000_000_000_000),
    ("Years", 31_536_000_000_000_000),
]

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)
_env.filters["rfc3339"] = rfc3339


def render_timer(timer: Timer, now: Optional[datetime] = None) -> str:
    """
    Render one timer as an htmx fragment.

    Args:
        timer: A persisted timer (id must be set)
        now: Reference time for never-completed timers; defaults to the current local time
    """
    return _render("timer.html", timer=timer, now=now or local_now())


def render_home(timers: Iterable[Timer], now: Optional[datetime] = None) -> str:
    """Render the full page listing every timer."""
    return _render(
        "home.html",
        timers=list(timers),
        now=now or local_now(),
        frequency_units=FREQUENCY_UNITS,
    )


def _render(template_name: str, **context) -> str:
    try:
        return _env.get_template(template_name).render(**context)
    except (TemplateError, OverflowError) as e:
        raise RenderError(f"Error rendering {template_name}: {e}") from e
