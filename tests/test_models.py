"""Tests for the Trade record model and lifecycle."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tradejournal.exceptions import TradeStateError
from tradejournal.models import TimeWindow, Trade


def make_trade(**overrides) -> Trade:
    data = {
        "symbol": "aapl",
        "side": "BUY",
        "entry_date": datetime(2024, 3, 1, 10, 0),
        "entry_price": Decimal("150.50"),
        "quantity": Decimal("100"),
    }
    data.update(overrides)
    return Trade(**data)


class TestTradeValidation:
    """Trade records enforce their invariants on construction."""

    def test_symbol_is_uppercased_and_stripped(self):
        assert make_trade(symbol="  msft ").symbol == "MSFT"

    def test_blank_symbol_rejected(self):
        with pytest.raises(ValidationError):
            make_trade(symbol="   ")

    def test_defaults(self):
        trade = make_trade()
        assert trade.status == "OPEN"
        assert trade.commission == Decimal("0")
        assert trade.fees == Decimal("0")
        assert trade.exit_date is None
        assert trade.exit_price is None
        assert trade.tags == []
        assert trade.owner_id == "default"

    def test_float_input_keeps_short_decimal(self):
        trade = make_trade(entry_price=0.1, quantity=3)
        assert trade.entry_price == Decimal("0.1")
        assert trade.entry_value == Decimal("0.3")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("entry_price", Decimal("-1")),
            ("quantity", Decimal("0")),
            ("quantity", Decimal("-5")),
            ("commission", Decimal("-0.01")),
            ("fees", Decimal("-2")),
        ],
    )
    def test_negative_amounts_rejected(self, field, value):
        with pytest.raises(ValidationError):
            make_trade(**{field: value})

    def test_zero_entry_price_allowed(self):
        assert make_trade(entry_price=Decimal("0")).entry_value == Decimal("0")

    def test_invalid_side_rejected(self):
        with pytest.raises(ValidationError):
            make_trade(side="HOLD")

    def test_exit_fields_must_be_paired(self):
        with pytest.raises(ValidationError):
            make_trade(exit_price=Decimal("160"))
        with pytest.raises(ValidationError):
            make_trade(exit_date=datetime(2024, 3, 2))

    def test_closed_requires_exit_fields(self):
        with pytest.raises(ValidationError):
            make_trade(status="CLOSED")

    def test_exit_before_entry_is_tolerated(self):
        trade = make_trade(
            status="CLOSED",
            exit_date=datetime(2024, 2, 1),
            exit_price=Decimal("140"),
        )
        assert trade.exit_date < trade.entry_date

    def test_blank_strategy_becomes_none(self):
        assert make_trade(strategy="  ").strategy is None

    def test_long_tag_rejected(self):
        with pytest.raises(ValidationError):
            make_trade(tags=["x" * 51])

    def test_trade_is_frozen(self):
        trade = make_trade()
        with pytest.raises(ValidationError):
            trade.symbol = "TSLA"

    def test_costs(self):
        trade = make_trade(commission=Decimal("1.50"), fees=Decimal("0.50"))
        assert trade.costs == Decimal("2.00")


class TestTradeLifecycle:
    """OPEN trades can be closed or cancelled; nothing else transitions."""

    def test_close_returns_new_closed_trade(self):
        trade = make_trade()
        closed = trade.close(Decimal("158.75"), datetime(2024, 3, 5))

        assert trade.status == "OPEN"
        assert closed.status == "CLOSED"
        assert closed.exit_price == Decimal("158.75")
        assert closed.exit_date == datetime(2024, 3, 5)
        assert closed.symbol == trade.symbol

    def test_close_defaults_exit_date_to_now(self):
        before = datetime.now()
        closed = make_trade().close(Decimal("1"))
        assert closed.exit_date >= before

    def test_close_non_open_trade_fails(self):
        closed = make_trade().close(Decimal("158.75"), datetime(2024, 3, 5))
        with pytest.raises(TradeStateError):
            closed.close(Decimal("160"))

    def test_cancel(self):
        cancelled = make_trade().cancel()
        assert cancelled.status == "CANCELLED"
        with pytest.raises(TradeStateError):
            cancelled.cancel()


class TestTimeWindow:
    """Time windows are half-open and know their predecessor."""

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError):
            TimeWindow(start=datetime(2024, 1, 2), end=datetime(2024, 1, 1))

    def test_contains_is_half_open(self):
        window = TimeWindow(start=datetime(2024, 1, 1), end=datetime(2024, 2, 1))
        assert window.contains(datetime(2024, 1, 1))
        assert window.contains(datetime(2024, 1, 31, 23, 59))
        assert not window.contains(datetime(2024, 2, 1))

    def test_preceding_has_same_length(self):
        window = TimeWindow(start=datetime(2024, 1, 11), end=datetime(2024, 1, 21))
        previous = window.preceding()
        assert previous.end == window.start
        assert previous.length == window.length
        assert not previous.overlaps(window)

    def test_aware_bounds_compare_with_naive_trades(self):
        eastern = timezone(timedelta(hours=-5))
        window = TimeWindow(
            start=datetime(2024, 1, 1, tzinfo=eastern), end=datetime(2024, 2, 1, tzinfo=eastern)
        )
        assert window.start == datetime(2024, 1, 1, 5, 0)
        assert window.contains(datetime(2024, 1, 1, 5, 0))
        assert not window.contains(datetime(2024, 1, 1, 4, 59))
        assert window.contains(datetime(2024, 1, 1, 0, 0, tzinfo=eastern))


class TestSymbolSeparators:
    """Symbols never contain characters that would split an export row."""

    @pytest.mark.parametrize("symbol", ["BRK,B", "AA\nPL", "MS\rFT"])
    def test_separator_rejected(self, symbol):
        with pytest.raises(ValidationError):
            make_trade(symbol=symbol)

    @pytest.mark.parametrize("symbol", ["BRK.B", "BTC/USD", "ES-MINI"])
    def test_punctuation_allowed(self, symbol):
        assert make_trade(symbol=symbol).symbol == symbol


class TestTimestampNormalization:
    """Timezone-aware timestamps are stored as naive UTC."""

    def test_aware_entry_converted_to_utc(self):
        tokyo = timezone(timedelta(hours=9))
        trade = make_trade(entry_date=datetime(2024, 3, 1, 9, 0, tzinfo=tokyo))
        assert trade.entry_date == datetime(2024, 3, 1, 0, 0)
        assert trade.entry_date.tzinfo is None

    def test_mixed_awareness_accepted(self):
        trade = make_trade(
            entry_date=datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc),
            exit_date=datetime(2024, 3, 2, 10, 0),
            exit_price=Decimal("151"),
            status="CLOSED",
        )
        assert trade.exit_date - trade.entry_date == timedelta(days=1)

    def test_naive_timestamps_untouched(self):
        assert make_trade().entry_date == datetime(2024, 3, 1, 10, 0)
