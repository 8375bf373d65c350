"""Derived analytics value objects."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from tradejournal.models.window import TimeWindow

ZERO = Decimal("0")


class TradeMetrics(BaseModel):
    """Realized P&L figures for one trade."""

    profit: Decimal = Field(default=ZERO, description="Realized profit")
    profit_percentage: Decimal = Field(
        default=ZERO, description="Profit as a percentage of entry notional"
    )
    duration_days: Optional[int] = Field(
        default=None, description="Holding period in days (None while open)"
    )

    model_config = {"frozen": True}


class SummaryStatistics(BaseModel):
    """Aggregate statistics over a collection of trades.

    ``profit_factor`` is ``None`` when there are winning trades but no
    losing trades, i.e. the ratio is unbounded.
    """

    total_trades: int = Field(default=0, ge=0)
    open_trades: int = Field(default=0, ge=0)
    closed_trades: int = Field(default=0, ge=0)
    cancelled_trades: int = Field(default=0, ge=0)
    winning_trades: int = Field(default=0, ge=0)
    losing_trades: int = Field(default=0, ge=0)
    total_profit: Decimal = ZERO
    average_profit: Decimal = ZERO
    biggest_win: Decimal = ZERO
    biggest_loss: Decimal = ZERO
    win_rate: Decimal = Field(default=ZERO, ge=0, le=100)
    profit_factor: Optional[Decimal] = ZERO
    total_volume: Decimal = ZERO
    total_commissions: Decimal = ZERO
    net_profit: Decimal = ZERO
    roi: Decimal = ZERO
    average_hold_duration_days: Decimal = ZERO
    gross_profit: Decimal = ZERO
    gross_loss: Decimal = ZERO
    average_win: Decimal = ZERO
    average_loss: Decimal = ZERO
    payoff_ratio: Decimal = ZERO
    max_drawdown: Decimal = ZERO

    model_config = {"frozen": True}

    @property
    def profit_factor_unbounded(self) -> bool:
        return self.profit_factor is None


class GroupBreakdown(BaseModel):
    """Statistics for one partition of a trade collection."""

    key: Optional[str] = Field(..., description="Group key (None for missing values)")
    statistics: SummaryStatistics

    model_config = {"frozen": True}


class MetricDelta(BaseModel):
    """Current vs previous value of one metric."""

    current: Decimal
    previous: Decimal
    change: Decimal
    change_percent: Decimal

    model_config = {"frozen": True}


class ComparisonResult(BaseModel):
    """Statistics for two consecutive windows and their deltas."""

    current_window: TimeWindow
    previous_window: TimeWindow
    current: SummaryStatistics
    previous: SummaryStatistics
    total_trades: MetricDelta
    total_profit: MetricDelta
    win_rate: MetricDelta

    model_config = {"frozen": True}
