"""Trade analytics and reporting engine.

Every function here is pure: it reads the trades it is given, never
modifies them, and takes the owner's ``auto_calculate_profit`` setting as
an explicit argument.
"""

from tradejournal.analytics.comparison import compare_months, compare_periods, metric_delta
from tradejournal.analytics.export import (
    EXPORT_COLUMNS,
    export_csv,
    export_filename,
    export_records,
)
from tradejournal.analytics.grouping import group_trades, rank_trades
from tradejournal.analytics.periods import (
    PERIODS,
    calendar_month,
    day_window,
    filter_by_window,
    period_label,
    resolve_period,
)
from tradejournal.analytics.pnl import calculate_profit, calculate_trade_metrics
from tradejournal.analytics.reports import (
    daily_report,
    generate_report,
    monthly_report,
    symbol_report,
)
from tradejournal.analytics.summary import summarize

__all__ = [
    "calculate_profit",
    "calculate_trade_metrics",
    "summarize",
    "group_trades",
    "rank_trades",
    "compare_periods",
    "compare_months",
    "metric_delta",
    "EXPORT_COLUMNS",
    "export_csv",
    "export_records",
    "export_filename",
    "PERIODS",
    "calendar_month",
    "day_window",
    "filter_by_window",
    "period_label",
    "resolve_period",
    "generate_report",
    "daily_report",
    "monthly_report",
    "symbol_report",
]
