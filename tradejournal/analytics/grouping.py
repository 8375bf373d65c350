"""Grouping and time-bucketing of trade collections."""

import logging
from collections import defaultdict
from typing import Callable, Iterable, Literal, Optional, Union

from tradejournal.analytics.pnl import calculate_trade_metrics
from tradejournal.analytics.summary import summarize_metrics
from tradejournal.models import GroupBreakdown, RankedTrade, Trade

logger = logging.getLogger(__name__)

GroupBy = Literal["symbol", "strategy", "day", "month", "year"]
KeyFunction = Callable[[Trade], Optional[str]]

KEY_FUNCTIONS: dict[str, KeyFunction] = {
    "symbol": lambda trade: trade.symbol,
    "strategy": lambda trade: trade.strategy,
    "day": lambda trade: trade.entry_date.strftime("%Y-%m-%d"),
    "month": lambda trade: trade.entry_date.strftime("%Y-%m"),
    "year": lambda trade: trade.entry_date.strftime("%Y"),
}

# Bucket keys for these groupings sort chronologically as plain strings.
CALENDAR_GROUPINGS = ("day", "month", "year")


def _by_profit(group: GroupBreakdown):
    return (-group.statistics.total_profit, group.key is not None, group.key or "")


def _by_key(group: GroupBreakdown):
    return (group.key is not None, group.key or "")


def group_trades(
    trades: Iterable[Trade],
    by: Union[GroupBy, KeyFunction],
    auto_calculate_profit: bool,
    top_n: Optional[int] = None,
) -> list[GroupBreakdown]:
    """Partition trades by a key and summarize each partition.

    Args:
        trades: Trades to partition. The collection is not modified.
        by: A grouping name (``symbol``, ``strategy``, ``day``, ``month``,
            ``year``) or a function returning the key of a trade.
        auto_calculate_profit: Owner setting passed to the P&L calculator.
        top_n: Keep only the first ``top_n`` groups after sorting.

    Returns:
        Calendar groupings in ascending chronological order; everything else
        by descending total profit, ties broken by ascending key. Trades
        without a key (e.g. no strategy) form a group keyed ``None``.
    """
    if callable(by):
        key_for = by
        chronological = False
    else:
        try:
            key_for = KEY_FUNCTIONS[by]
        except KeyError:
            raise ValueError(
                f"Unknown grouping '{by}'. Choose from: {', '.join(KEY_FUNCTIONS)}"
            ) from None
        chronological = by in CALENDAR_GROUPINGS

    partitions: dict[Optional[str], tuple[list, list]] = defaultdict(lambda: ([], []))
    for trade in trades:
        key = key_for(trade)
        if key == "":
            key = None
        members, metrics = partitions[key]
        members.append(trade)
        metrics.append(calculate_trade_metrics(trade, auto_calculate_profit))

    groups = [
        GroupBreakdown(key=key, statistics=summarize_metrics(members, metrics))
        for key, (members, metrics) in partitions.items()
    ]
    groups.sort(key=_by_key if chronological else _by_profit)

    logger.debug("Grouped trades into %d buckets", len(groups))
    if top_n is not None:
        return groups[:top_n]
    return groups


def rank_trades(
    trades: Iterable[Trade],
    auto_calculate_profit: bool,
    limit: int = 5,
    losers: bool = False,
) -> list[RankedTrade]:
    """Best winning (or worst losing) closed trades.

    Args:
        trades: Trades to rank.
        auto_calculate_profit: Owner setting passed to the P&L calculator.
        limit: Maximum number of trades returned.
        losers: Rank losing trades, biggest loss first, instead of winners.

    Returns:
        Ranked trades with their metrics. Trades with zero profit are
        neither winners nor losers.
    """
    ranked = []
    for trade in trades:
        metrics = calculate_trade_metrics(trade, auto_calculate_profit)
        if trade.status != "CLOSED":
            continue
        if (metrics.profit < 0) if losers else (metrics.profit > 0):
            ranked.append(RankedTrade(trade=trade, metrics=metrics))

    if losers:
        ranked.sort(key=lambda item: item.metrics.profit)
    else:
        ranked.sort(key=lambda item: item.metrics.profit, reverse=True)
    return ranked[:limit]
