"""
Due-status classification shared by every screen that shows a due date.

The asset list badges, the asset metric cards and the ``due`` filters
on the asset list all call ``classify_due_date`` so they can never
disagree about what "due soon" means.
"""

from datetime import date, timedelta
from enum import Enum

# Inclusive upper bounds (in days from today) for each band.
DUE_SOON_DAYS = 30
UPCOMING_DAYS = 90


class DueStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"
    OK = "ok"
    NONE = "none"


def days_until(due: date, today: date) -> int:
    """Whole calendar days from ``today`` to ``due`` (negative if past)."""
    return (due - today).days


def classify_due_date(due: date | None, today: date) -> DueStatus:
    """
    Place ``due`` into a band relative to ``today``.

    ``due < today`` is overdue, 0-30 days is due soon, 31-90 days is
    upcoming, anything later is ok.  A missing date is ``NONE``.
    """
    if due is None:
        return DueStatus.NONE
    remaining = days_until(due, today)
    if remaining < 0:
        return DueStatus.OVERDUE
    if remaining <= DUE_SOON_DAYS:
        return DueStatus.DUE_SOON
    if remaining <= UPCOMING_DAYS:
        return DueStatus.UPCOMING
    return DueStatus.OK


def is_overdue(due: date | None, today: date) -> bool:
    return classify_due_date(due, today) is DueStatus.OVERDUE


def is_due_soon(due: date | None, today: date) -> bool:
    return classify_due_date(due, today) is DueStatus.DUE_SOON


def due_date_bounds(status: DueStatus, today: date) -> tuple[date | None, date | None]:
    """
    Return the inclusive ``(earliest, latest)`` due dates for a band so
    list queries can filter in SQL with the same thresholds.

    ``None`` on either side means unbounded.  ``NONE`` has no range and
    callers filter on ``IS NULL`` instead.
    """
    if status is DueStatus.OVERDUE:
        return None, today - timedelta(days=1)
    if status is DueStatus.DUE_SOON:
        return today, today + timedelta(days=DUE_SOON_DAYS)
    if status is DueStatus.UPCOMING:
        return (
            today + timedelta(days=DUE_SOON_DAYS + 1),
            today + timedelta(days=UPCOMING_DAYS),
        )
    if status is DueStatus.OK:
        return today + timedelta(days=UPCOMING_DAYS + 1), None
    raise ValueError("DueStatus.NONE has no date range.")
