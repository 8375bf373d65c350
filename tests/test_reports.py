"""Tests for composed reports."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from tradejournal.analytics.reports import (
    daily_report,
    generate_report,
    monthly_report,
    symbol_report,
)
from tradejournal.analytics.periods import calendar_month
from tradejournal.exceptions import NoTradesError
from tradejournal.models import Trade

AS_OF = datetime(2024, 3, 20, 12, 0)


def make_trade(symbol, profit, entry_date, strategy=None, status="CLOSED") -> Trade:
    data = {
        "symbol": symbol,
        "side": "BUY",
        "strategy": strategy,
        "entry_date": entry_date,
        "entry_price": Decimal("10"),
        "quantity": Decimal("1"),
        "status": status,
        "manual_profit": Decimal(profit),
    }
    if status == "CLOSED":
        data["exit_date"] = entry_date + timedelta(hours=3)
        data["exit_price"] = Decimal("10")
    return Trade(**data)


@pytest.fixture
def trades() -> list[Trade]:
    return [
        make_trade("AAPL", "100", datetime(2024, 3, 1, 10), "breakout"),
        make_trade("AAPL", "-40", datetime(2024, 3, 1, 9), "breakout"),
        make_trade("MSFT", "25", datetime(2024, 3, 5, 11), "reversal"),
        make_trade("TSLA", "-10", datetime(2024, 2, 10, 14)),
        make_trade("NVDA", "0", datetime(2024, 3, 1, 15), status="OPEN"),
        make_trade("AMD", "500", datetime(2022, 6, 1, 10)),
    ]


class TestGenerateReport:
    def test_all_time(self, trades):
        report = generate_report(trades, False, as_of=AS_OF)

        assert report.period == "All Time"
        assert report.window is None
        assert report.summary.total_trades == 6
        assert report.summary.total_profit == Decimal("575")
        assert [g.key for g in report.top_symbols] == ["AMD", "AAPL", "MSFT", "NVDA", "TSLA"]
        assert [g.key for g in report.strategies] == [None, "breakout", "reversal"]

    def test_monthly_performance_limited_to_last_year(self, trades):
        report = generate_report(trades, False, as_of=AS_OF)
        months = [(g.key, g.statistics.total_profit) for g in report.monthly_performance]
        assert months == [("2024-02", Decimal("-10")), ("2024-03", Decimal("85"))]

    def test_windowed(self, trades):
        report = generate_report(trades, False, as_of=AS_OF, window=calendar_month(2024, 3))

        assert report.period == "Mar 01, 2024 - Mar 31, 2024"
        assert report.summary.total_trades == 4
        assert report.summary.total_profit == Decimal("85")

    def test_top_symbols_capped(self):
        many = [make_trade(f"S{i:02d}", str(i), AS_OF - timedelta(days=1)) for i in range(15)]
        report = generate_report(many, False, as_of=AS_OF, label="Custom")
        assert report.period == "Custom"
        assert len(report.top_symbols) == 10
        assert report.top_symbols[0].key == "S14"


class TestDailyReport:
    def test_day(self, trades):
        report = daily_report(trades, date(2024, 3, 1), False)

        assert report.summary.total_trades == 3
        assert report.summary.open_trades == 1
        assert report.summary.total_profit == Decimal("60")
        assert [t.entry_date.hour for t in report.trades] == [9, 10, 15]
        assert report.symbols == ["AAPL", "NVDA"]
        assert report.strategies == ["breakout", None]

    def test_empty_day(self, trades):
        report = daily_report(trades, date(2024, 3, 2), False)
        assert report.summary.total_trades == 0
        assert report.trades == []


class TestMonthlyReport:
    def test_month(self, trades):
        report = monthly_report(trades, 2024, 3, False)

        assert report.label == "March 2024"
        assert report.summary.total_trades == 4
        assert [g.key for g in report.daily_breakdown] == ["2024-03-01", "2024-03-05"]
        assert [r.metrics.profit for r in report.top_performers] == [Decimal("100"), Decimal("25")]
        assert [r.metrics.profit for r in report.worst_performers] == [Decimal("-40")]


class TestSymbolReport:
    def test_symbol_case_insensitive(self, trades):
        report = symbol_report(trades, " aapl ", False)

        assert report.symbol == "AAPL"
        assert report.statistics.total_trades == 2
        assert report.statistics.win_rate == Decimal("50")
        assert report.trades[0].entry_date > report.trades[1].entry_date

    def test_unknown_symbol(self, trades):
        with pytest.raises(NoTradesError):
            symbol_report(trades, "GME", False)
