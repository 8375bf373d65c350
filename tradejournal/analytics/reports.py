"""Composed reports built from the analytics primitives."""

from datetime import date, datetime
from typing import Iterable, Optional

from tradejournal.analytics.grouping import group_trades, rank_trades
from tradejournal.analytics.periods import (
    calendar_month,
    day_window,
    filter_by_window,
    period_label,
    shift_months,
)
from tradejournal.analytics.summary import summarize
from tradejournal.exceptions import NoTradesError
from tradejournal.models import (
    DailyReport,
    MonthlyReport,
    PerformanceReport,
    SymbolReport,
    TimeWindow,
    Trade,
)

TOP_SYMBOLS = 10
TOP_PERFORMERS = 5
MONTHLY_HISTORY_MONTHS = 12


def generate_report(
    trades: Iterable[Trade],
    auto_calculate_profit: bool,
    as_of: datetime,
    window: Optional[TimeWindow] = None,
    label: Optional[str] = None,
) -> PerformanceReport:
    """Overall performance report.

    Args:
        trades: Owner's trades.
        auto_calculate_profit: Owner setting.
        as_of: Report time. Monthly performance covers the twelve months
            before it.
        window: Optional entry-date window; None reports all time.
        label: Period label. Derived from the window when omitted.
    """
    scoped = filter_by_window(trades, window)
    since = shift_months(as_of, -MONTHLY_HISTORY_MONTHS)
    recent = [trade for trade in scoped if trade.entry_date >= since]

    return PerformanceReport(
        period=label or period_label(window=window),
        window=window,
        generated=as_of,
        summary=summarize(scoped, auto_calculate_profit),
        top_symbols=group_trades(scoped, "symbol", auto_calculate_profit, top_n=TOP_SYMBOLS),
        strategies=group_trades(scoped, "strategy", auto_calculate_profit),
        monthly_performance=group_trades(recent, "month", auto_calculate_profit),
    )


def daily_report(
    trades: Iterable[Trade], day: date, auto_calculate_profit: bool
) -> DailyReport:
    """Trades entered on one calendar day, ordered by entry time."""
    todays = sorted(
        filter_by_window(trades, day_window(day)), key=lambda trade: trade.entry_date
    )
    return DailyReport(
        date=day,
        summary=summarize(todays, auto_calculate_profit),
        symbols=list(dict.fromkeys(trade.symbol for trade in todays)),
        strategies=list(dict.fromkeys(trade.strategy for trade in todays)),
        trades=todays,
    )


def monthly_report(
    trades: Iterable[Trade], year: int, month: int, auto_calculate_profit: bool
) -> MonthlyReport:
    """Calendar month summary with per-day breakdown and extremes."""
    window = calendar_month(year, month)
    scoped = filter_by_window(trades, window)
    return MonthlyReport(
        year=year,
        month=month,
        label=f"{window.start:%B %Y}",
        summary=summarize(scoped, auto_calculate_profit),
        daily_breakdown=group_trades(scoped, "day", auto_calculate_profit),
        top_performers=rank_trades(scoped, auto_calculate_profit, limit=TOP_PERFORMERS),
        worst_performers=rank_trades(
            scoped, auto_calculate_profit, limit=TOP_PERFORMERS, losers=True
        ),
    )


def symbol_report(
    trades: Iterable[Trade], symbol: str, auto_calculate_profit: bool
) -> SymbolReport:
    """Statistics for one symbol, newest trade first.

    Raises:
        NoTradesError: If no trade matches the symbol.
    """
    symbol = symbol.strip().upper()
    matching = sorted(
        (trade for trade in trades if trade.symbol == symbol),
        key=lambda trade: trade.entry_date,
        reverse=True,
    )
    if not matching:
        raise NoTradesError(f"No trades found for symbol {symbol}")
    return SymbolReport(
        symbol=symbol,
        statistics=summarize(matching, auto_calculate_profit),
        trades=matching,
    )
