"""
Calendar helpers for selecting the planning day.
"""

from __future__ import annotations

from datetime import date, timedelta


def local_today() -> date:
    """Return today's date in the local calendar of the running process."""
    return date.today()


def target_date(today: date | None = None, *, days_ahead: int = 1) -> date:
    """Return the planning day, which is tomorrow unless told otherwise."""
    return (today or local_today()) + timedelta(days=days_ahead)
