"""Per-trade profit and loss calculation."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from tradejournal.models import Trade, TradeMetrics

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def holding_days(entry_date: datetime, exit_date: Optional[datetime]) -> Optional[int]:
    """Whole days between entry and exit, rounded up.

    A partial day counts as a full day. An exit recorded before the entry
    yields a negative (or zero) value instead of an error.
    """
    if exit_date is None:
        return None
    delta = exit_date - entry_date
    # timedelta keeps seconds/microseconds non-negative, so any remainder
    # means the exact value lies above delta.days
    return delta.days + (1 if delta.seconds or delta.microseconds else 0)


def percent_of(amount: Decimal, base: Decimal) -> Decimal:
    """``amount / base * 100``, or zero when ``base`` is zero."""
    if base == 0:
        return ZERO
    return amount / base * HUNDRED


def calculate_profit(trade: Trade, auto_calculate_profit: bool) -> Decimal:
    """Realized profit of a trade under the owner's profit setting.

    Args:
        trade: Trade to evaluate.
        auto_calculate_profit: Owner setting. When False the user-entered
            ``manual_profit`` is used verbatim.

    Returns:
        Realized profit; zero for trades that are not CLOSED.
    """
    if trade.status != "CLOSED":
        return ZERO

    if not auto_calculate_profit:
        return trade.manual_profit if trade.manual_profit is not None else ZERO

    entry_value = trade.entry_price * trade.quantity
    exit_value = trade.exit_price * trade.quantity
    if trade.side == "BUY":
        return exit_value - entry_value - trade.costs
    return entry_value - exit_value - trade.costs


def calculate_trade_metrics(trade: Trade, auto_calculate_profit: bool) -> TradeMetrics:
    """Compute profit, profit percentage and holding duration for one trade.

    Args:
        trade: Trade to evaluate.
        auto_calculate_profit: Owner setting, see :func:`calculate_profit`.

    Returns:
        TradeMetrics. Open and cancelled trades report zero profit and no
        duration.
    """
    if trade.status != "CLOSED":
        return TradeMetrics()

    profit = calculate_profit(trade, auto_calculate_profit)
    return TradeMetrics(
        profit=profit,
        profit_percentage=percent_of(profit, trade.entry_value),
        duration_days=holding_days(trade.entry_date, trade.exit_date),
    )
