"""Composed report data models."""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tradejournal.models.metrics import GroupBreakdown, SummaryStatistics, TradeMetrics
from tradejournal.models.trade import Trade
from tradejournal.models.window import TimeWindow


class RankedTrade(BaseModel):
    """A trade paired with its computed metrics."""

    trade: Trade
    metrics: TradeMetrics

    model_config = {"frozen": True}


class PerformanceReport(BaseModel):
    """Overall performance report for a period."""

    period: str = Field(..., description="Human readable period label")
    window: Optional[TimeWindow] = Field(default=None, description="None means all time")
    generated: datetime = Field(..., description="Report timestamp")
    summary: SummaryStatistics
    top_symbols: list[GroupBreakdown] = Field(default_factory=list)
    strategies: list[GroupBreakdown] = Field(default_factory=list)
    monthly_performance: list[GroupBreakdown] = Field(default_factory=list)

    model_config = {"frozen": True}


class DailyReport(BaseModel):
    """Summary of the trades entered on one calendar day."""

    date: date_type
    summary: SummaryStatistics
    symbols: list[str] = Field(default_factory=list)
    strategies: list[Optional[str]] = Field(default_factory=list)
    trades: list[Trade] = Field(default_factory=list)

    model_config = {"frozen": True}


class MonthlyReport(BaseModel):
    """Summary of one calendar month with daily breakdown."""

    year: int
    month: int = Field(..., ge=1, le=12)
    label: str
    summary: SummaryStatistics
    daily_breakdown: list[GroupBreakdown] = Field(default_factory=list)
    top_performers: list[RankedTrade] = Field(default_factory=list)
    worst_performers: list[RankedTrade] = Field(default_factory=list)

    model_config = {"frozen": True}


class SymbolReport(BaseModel):
    """Statistics for every trade in one symbol."""

    symbol: str
    statistics: SummaryStatistics
    trades: list[Trade] = Field(default_factory=list)

    model_config = {"frozen": True}
