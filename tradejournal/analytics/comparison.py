"""Current vs previous period comparison."""

from decimal import Decimal
from typing import Iterable, Optional

from tradejournal.analytics.periods import calendar_month, filter_by_window, shift_months
from tradejournal.analytics.pnl import percent_of
from tradejournal.analytics.summary import summarize
from tradejournal.exceptions import InvalidWindowError
from tradejournal.models import ComparisonResult, MetricDelta, TimeWindow, Trade


def metric_delta(current: Decimal, previous: Decimal) -> MetricDelta:
    """Absolute and percent change.

    Percent change is measured against the magnitude of the previous value,
    so a move from -100 to 50 is +150%. It is zero when the previous value
    is zero. Negative baselines get a real percentage instead of the web
    app's flat zero for any ``previous <= 0``.
    """
    change = current - previous
    return MetricDelta(
        current=current,
        previous=previous,
        change=change,
        change_percent=percent_of(change, abs(previous)),
    )


def compare_periods(
    trades: Iterable[Trade],
    current: TimeWindow,
    auto_calculate_profit: bool,
    previous: Optional[TimeWindow] = None,
) -> ComparisonResult:
    """Summarize two windows of the same collection and compute deltas.

    Args:
        trades: Full trade collection; each window selects by entry date.
        current: The current window.
        auto_calculate_profit: Owner setting passed to the P&L calculator.
        previous: The earlier window. Defaults to the window of equal length
            immediately before ``current``.

    Raises:
        InvalidWindowError: If the two windows overlap.
    """
    previous = previous or current.preceding()
    if current.overlaps(previous):
        raise InvalidWindowError("compared windows must not overlap")

    trades = list(trades)
    current_stats = summarize(filter_by_window(trades, current), auto_calculate_profit)
    previous_stats = summarize(filter_by_window(trades, previous), auto_calculate_profit)

    return ComparisonResult(
        current_window=current,
        previous_window=previous,
        current=current_stats,
        previous=previous_stats,
        total_trades=metric_delta(
            Decimal(current_stats.total_trades), Decimal(previous_stats.total_trades)
        ),
        total_profit=metric_delta(current_stats.total_profit, previous_stats.total_profit),
        win_rate=metric_delta(current_stats.win_rate, previous_stats.win_rate),
    )


def compare_months(
    trades: Iterable[Trade], year: int, month: int, auto_calculate_profit: bool
) -> ComparisonResult:
    """Compare a calendar month with the calendar month before it."""
    current = calendar_month(year, month)
    before = shift_months(current.start, -1)
    previous = calendar_month(before.year, before.month)
    return compare_periods(trades, current, auto_calculate_profit, previous=previous)
