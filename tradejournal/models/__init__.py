"""Data models for TradeJournal."""

from tradejournal.models.trade import Trade, TradeSide, TradeStatus
from tradejournal.models.window import TimeWindow
from tradejournal.models.metrics import (
    ComparisonResult,
    GroupBreakdown,
    MetricDelta,
    SummaryStatistics,
    TradeMetrics,
)
from tradejournal.models.report import (
    DailyReport,
    MonthlyReport,
    PerformanceReport,
    RankedTrade,
    SymbolReport,
)

__all__ = [
    "Trade",
    "TradeSide",
    "TradeStatus",
    "TimeWindow",
    "TradeMetrics",
    "SummaryStatistics",
    "GroupBreakdown",
    "MetricDelta",
    "ComparisonResult",
    "RankedTrade",
    "PerformanceReport",
    "DailyReport",
    "MonthlyReport",
    "SymbolReport",
]
