"""Property-based tests for per-trade P&L calculation."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics.pnl import calculate_profit, calculate_trade_metrics, holding_days
from tradejournal.models import Trade

prices = st.decimals(min_value="0.01", max_value="100000", places=2)
quantities = st.decimals(min_value="0.01", max_value="10000", places=2)
costs = st.decimals(min_value="0", max_value="100", places=2)


def closed_trade(side: str, entry_price, exit_price, quantity, commission="0", fees="0", **extra) -> Trade:
    return Trade(
        symbol="TEST",
        side=side,
        entry_date=datetime(2024, 1, 1, 9, 30),
        entry_price=Decimal(entry_price),
        quantity=Decimal(quantity),
        exit_date=datetime(2024, 1, 5, 15, 0),
        exit_price=Decimal(exit_price),
        status="CLOSED",
        commission=Decimal(commission),
        fees=Decimal(fees),
        **extra,
    )


class TestAutoCalculatedProfit:
    """
    *For any* closed trade with automatic profit calculation, profit is the
    price move times quantity in the trade's direction, minus costs.
    """

    @given(entry=prices, exit=prices, qty=quantities, commission=costs, fees=costs)
    @settings(max_examples=100)
    def test_buy_profit(self, entry, exit, qty, commission, fees):
        trade = closed_trade("BUY", entry, exit, qty, commission, fees)
        expected = (exit - entry) * qty - commission - fees
        assert calculate_profit(trade, True) == expected

    @given(entry=prices, exit=prices, qty=quantities, commission=costs, fees=costs)
    @settings(max_examples=100)
    def test_sell_profit(self, entry, exit, qty, commission, fees):
        trade = closed_trade("SELL", entry, exit, qty, commission, fees)
        expected = (entry - exit) * qty - commission - fees
        assert calculate_profit(trade, True) == expected

    def test_reference_buy_scenario(self):
        trade = closed_trade("BUY", "150.50", "158.75", "100", "1.50", "0.50")
        metrics = calculate_trade_metrics(trade, True)

        assert metrics.profit == Decimal("823.00")
        assert round(metrics.profit_percentage, 2) == Decimal("5.47")

    def test_manual_profit_ignored_when_auto(self):
        trade = closed_trade("BUY", "10", "12", "10", manual_profit=Decimal("-999"))
        assert calculate_profit(trade, True) == Decimal("20")

    def test_percentage_not_rounded_mid_computation(self):
        trade = closed_trade("BUY", "3", "4", "1")
        pct = calculate_trade_metrics(trade, True).profit_percentage
        assert pct != round(pct, 2)
        assert round(pct, 2) == Decimal("33.33")


class TestManualProfit:
    """With automatic calculation off, the user's profit is used verbatim."""

    def test_manual_profit_used(self):
        trade = closed_trade("BUY", "100", "50", "2", manual_profit=Decimal("42.5"))
        metrics = calculate_trade_metrics(trade, False)

        assert metrics.profit == Decimal("42.5")
        assert metrics.profit_percentage == Decimal("42.5") / Decimal("200") * 100

    def test_missing_manual_profit_defaults_to_zero(self):
        trade = closed_trade("SELL", "100", "50", "2")
        assert calculate_profit(trade, False) == Decimal("0")


class TestOpenAndCancelledTrades:
    """Trades that are not CLOSED have no realized P&L."""

    def test_open_trade(self):
        trade = Trade(
            symbol="TEST",
            side="BUY",
            entry_date=datetime(2024, 1, 1),
            entry_price=Decimal("10"),
            quantity=Decimal("1"),
            manual_profit=Decimal("5"),
        )
        for auto in (True, False):
            metrics = calculate_trade_metrics(trade, auto)
            assert metrics.profit == 0
            assert metrics.profit_percentage == 0
            assert metrics.duration_days is None

    def test_cancelled_trade(self):
        trade = Trade(
            symbol="TEST",
            side="SELL",
            entry_date=datetime(2024, 1, 1),
            entry_price=Decimal("10"),
            quantity=Decimal("1"),
            status="CANCELLED",
        )
        assert calculate_trade_metrics(trade, True).profit == 0


class TestEdgeCases:
    """Degenerate values resolve to defined numbers."""

    def test_zero_entry_value_gives_zero_percentage(self):
        trade = closed_trade("BUY", "0", "5", "10")
        metrics = calculate_trade_metrics(trade, True)
        assert metrics.profit == Decimal("50")
        assert metrics.profit_percentage == 0

    def test_duration_rounds_partial_days_up(self):
        entry = datetime(2024, 1, 1, 9, 30)
        assert holding_days(entry, entry) == 0
        assert holding_days(entry, entry + timedelta(hours=1)) == 1
        assert holding_days(entry, entry + timedelta(days=1)) == 1
        assert holding_days(entry, entry + timedelta(days=1, seconds=1)) == 2

    def test_exit_before_entry_gives_negative_duration(self):
        entry = datetime(2024, 1, 10)
        assert holding_days(entry, entry - timedelta(days=3)) == -3
        assert holding_days(entry, entry - timedelta(hours=36)) == -1

    def test_duration_from_metrics(self):
        trade = closed_trade("BUY", "1", "2", "1")
        assert calculate_trade_metrics(trade, True).duration_days == 5

    @given(seconds=st.integers(min_value=-10**8, max_value=10**8))
    @settings(max_examples=100)
    def test_duration_is_ceiling_of_days(self, seconds):
        entry = datetime(2020, 1, 1)
        days = holding_days(entry, entry + timedelta(seconds=seconds))
        assert days - 1 < seconds / 86400 <= days

    def test_mixed_timezone_awareness(self):
        trade = Trade(
            symbol="TEST",
            side="BUY",
            entry_date=datetime(2024, 1, 1, 9, 30, tzinfo=timezone(timedelta(hours=-5))),
            entry_price=Decimal("10"),
            quantity=Decimal("1"),
            exit_date=datetime(2024, 1, 3, 14, 0),
            exit_price=Decimal("11"),
            status="CLOSED",
        )
        # entry is 14:30 UTC, so the exit lands 1 day 23.5 hours later
        assert calculate_trade_metrics(trade, True).duration_days == 2
