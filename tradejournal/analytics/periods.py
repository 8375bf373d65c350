"""Time windows and named reporting periods."""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from tradejournal.exceptions import InvalidPeriodError
from tradejournal.models import TimeWindow, Trade

PERIODS = ("today", "week", "month", "quarter", "year", "all")

PERIOD_LABELS = {
    "today": "Today",
    "week": "Last 7 Days",
    "month": "Last Month",
    "quarter": "Last Quarter",
    "year": "Last Year",
    "all": "All Time",
}


def shift_months(moment: datetime, months: int) -> datetime:
    """Move a timestamp by whole calendar months, clamping the day."""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def day_window(day: date) -> TimeWindow:
    """Window covering one calendar day."""
    start = datetime.combine(day, time.min)
    return TimeWindow(start=start, end=start + timedelta(days=1))


def calendar_month(year: int, month: int) -> TimeWindow:
    """Window covering one calendar month."""
    start = datetime(year, month, 1)
    return TimeWindow(start=start, end=shift_months(start, 1))


def resolve_period(name: str, now: datetime) -> Optional[TimeWindow]:
    """Translate a named period into a window ending at ``now``.

    Args:
        name: One of :data:`PERIODS`.
        now: Reference time.

    Returns:
        A TimeWindow, or None for ``all``.

    Raises:
        InvalidPeriodError: If the name is unknown.
    """
    if name == "all":
        return None
    if name == "today":
        return day_window(now.date())

    # End just past "now" so a trade logged at this instant is included.
    end = now + timedelta(microseconds=1)
    if name == "week":
        return TimeWindow(start=now - timedelta(days=7), end=end)
    if name == "month":
        return TimeWindow(start=shift_months(now, -1), end=end)
    if name == "quarter":
        return TimeWindow(start=shift_months(now, -3), end=end)
    if name == "year":
        return TimeWindow(start=shift_months(now, -12), end=end)

    raise InvalidPeriodError(
        f"Unknown period '{name}'. Choose from: {', '.join(PERIODS)}"
    )


def period_label(
    name: Optional[str] = None, window: Optional[TimeWindow] = None
) -> str:
    """Human readable label for a named period or an explicit window."""
    if name is not None:
        return PERIOD_LABELS.get(name, name)
    if window is None:
        return PERIOD_LABELS["all"]
    last_day = window.end - timedelta(microseconds=1)
    return f"{window.start:%b %d, %Y} - {last_day:%b %d, %Y}"


def filter_by_window(trades: Iterable[Trade], window: Optional[TimeWindow]) -> list[Trade]:
    """Trades whose entry date falls inside the window (all if None)."""
    if window is None:
        return list(trades)
    return [trade for trade in trades if window.contains(trade.entry_date)]
