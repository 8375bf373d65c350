"""Aggregation of trade collections into summary statistics."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from tradejournal.analytics.pnl import ZERO, calculate_trade_metrics, percent_of
from tradejournal.models import SummaryStatistics, Trade, TradeMetrics

logger = logging.getLogger(__name__)


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning zero for a zero denominator."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def profit_factor(gross_profit: Decimal, gross_loss: Decimal) -> Optional[Decimal]:
    """Gross profit over absolute gross loss.

    Returns zero when nothing was won and ``None`` when there are gains but
    no losses to divide by.
    """
    if gross_profit == 0:
        return ZERO
    if gross_loss == 0:
        return None
    return gross_profit / abs(gross_loss)


def max_drawdown(profits: Iterable[Decimal]) -> Decimal:
    """Largest peak-to-trough fall of the running profit total.

    The running total starts at zero. The result is zero or positive.
    """
    equity = ZERO
    peak = ZERO
    drawdown = ZERO
    for profit in profits:
        equity += profit
        peak = max(peak, equity)
        drawdown = max(drawdown, peak - equity)
    return drawdown


def summarize_metrics(
    trades: list[Trade], metrics: list[TradeMetrics]
) -> SummaryStatistics:
    """Build SummaryStatistics from trades and their precomputed metrics."""
    open_trades = closed_trades = cancelled_trades = 0
    winning_trades = losing_trades = 0
    gross_profit = gross_loss = ZERO
    total_volume = total_commissions = ZERO
    biggest_win: Optional[Decimal] = None
    biggest_loss: Optional[Decimal] = None
    durations: list[int] = []
    realized: list[tuple[Trade, Decimal]] = []

    for trade, result in zip(trades, metrics):
        total_volume += trade.entry_value
        total_commissions += trade.costs

        if trade.status == "OPEN":
            open_trades += 1
            continue
        if trade.status == "CANCELLED":
            cancelled_trades += 1
            continue

        closed_trades += 1
        profit = result.profit
        realized.append((trade, profit))
        if result.duration_days is not None:
            durations.append(result.duration_days)

        biggest_win = profit if biggest_win is None else max(biggest_win, profit)
        biggest_loss = profit if biggest_loss is None else min(biggest_loss, profit)

        if profit > 0:
            winning_trades += 1
            gross_profit += profit
        elif profit < 0:
            losing_trades += 1
            gross_loss += profit

    total_profit = gross_profit + gross_loss
    closed = Decimal(closed_trades)
    average_win = safe_divide(gross_profit, Decimal(winning_trades))
    average_loss = safe_divide(gross_loss, Decimal(losing_trades))

    realized.sort(key=lambda item: item[0].exit_date)

    return SummaryStatistics(
        total_trades=len(trades),
        open_trades=open_trades,
        closed_trades=closed_trades,
        cancelled_trades=cancelled_trades,
        winning_trades=winning_trades,
        losing_trades=losing_trades,
        total_profit=total_profit,
        average_profit=safe_divide(total_profit, closed),
        biggest_win=biggest_win if biggest_win is not None else ZERO,
        biggest_loss=biggest_loss if biggest_loss is not None else ZERO,
        win_rate=percent_of(Decimal(winning_trades), closed),
        profit_factor=profit_factor(gross_profit, gross_loss),
        total_volume=total_volume,
        total_commissions=total_commissions,
        net_profit=total_profit - total_commissions,
        roi=percent_of(total_profit, total_volume),
        average_hold_duration_days=safe_divide(
            Decimal(sum(durations)), Decimal(len(durations))
        ),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        average_win=average_win,
        average_loss=average_loss,
        payoff_ratio=safe_divide(average_win, abs(average_loss)),
        max_drawdown=max_drawdown(profit for _, profit in realized),
    )


def summarize(trades: Iterable[Trade], auto_calculate_profit: bool) -> SummaryStatistics:
    """Reduce a trade collection to SummaryStatistics.

    Args:
        trades: Trades already restricted to the desired scope. The
            collection is not modified.
        auto_calculate_profit: Owner setting passed to the P&L calculator.

    Returns:
        SummaryStatistics. Empty collections and collections without closed
        trades resolve every ratio to zero.
    """
    trades = list(trades)
    metrics = [calculate_trade_metrics(trade, auto_calculate_profit) for trade in trades]
    stats = summarize_metrics(trades, metrics)
    logger.debug(
        "Summarized %d trades (%d closed, profit %s)",
        stats.total_trades,
        stats.closed_trades,
        stats.total_profit,
    )
    return stats
