"""Date-range resolver — pure date arithmetic for schedule windows.

Expands a window into its calendar days and derives, per task frequency,
the dates a task may be placed on. Weeks start on Monday.

No I/O: this module only transforms data.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from chore_planner.data.models import Frequency

DateLike = date | str


def parse_date(value: DateLike) -> date:
    """Return a date from a date object or an ISO YYYY-MM-DD string.

    A datetime is truncated to its date. Raises ValueError on malformed
    strings.
    """
    # datetime subclasses date; its isoformat() carries a time part
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def week_start(day: DateLike) -> date:
    """Return the Monday on or before ``day``."""
    d = parse_date(day)
    return d - timedelta(days=d.weekday())


def current_week(today: DateLike | None = None) -> tuple[date, date]:
    """Return (Monday, Sunday) of the week containing ``today``."""
    monday = week_start(today if today is not None else date.today())
    return monday, monday + timedelta(days=6)


def expand_date_range(start: DateLike, end: DateLike) -> list[str]:
    """Every date from start to end inclusive, ascending, as ISO strings.

    An inverted window (start > end) yields an empty list.
    """
    d = parse_date(start)
    last = parse_date(end)
    days: list[str] = []
    while d <= last:
        days.append(d.isoformat())
        d += timedelta(days=1)
    return days


def _next_month_start(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def _anchors(frequency: str, first: date, last: date) -> list[date]:
    """Period-boundary anchors from the period containing ``first`` up to ``last``."""
    if frequency == Frequency.DAILY.value:
        step = timedelta(days=1)
        d = first
    elif frequency == Frequency.WEEKLY.value:
        step = timedelta(days=7)
        d = week_start(first)
    elif frequency == Frequency.BI_WEEKLY.value:
        step = timedelta(days=14)
        d = week_start(first)
    elif frequency == Frequency.MONTHLY.value:
        anchors: list[date] = []
        d = first.replace(day=1)
        while d <= last:
            anchors.append(d)
            d = _next_month_start(d)
        return anchors
    else:
        return []

    anchors = []
    while d <= last:
        anchors.append(d)
        d += step
    return anchors


def candidate_dates(frequency: str, start: DateLike, end: DateLike) -> list[str]:
    """Ordered dates eligible for a task of the given frequency.

    Anchors falling before the window start are clamped to the start, so the
    period that is already running when the window opens still gets a slot.
    Unknown frequencies yield an empty list.
    """
    first = parse_date(start)
    last = parse_date(end)
    if first > last:
        return []

    dates: list[str] = []
    for anchor in _anchors(frequency, first, last):
        iso = max(anchor, first).isoformat()
        if not dates or dates[-1] != iso:
            dates.append(iso)
    return dates
