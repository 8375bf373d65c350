"""Property-based tests for the database store.

**Feature: trade-analytics**
"""

import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from tradejournal.db.store import DataStore
from tradejournal.exceptions import TradeNotFoundError
from tradejournal.models import TimeWindow, Trade


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


def make_trade(**overrides) -> Trade:
    data = {
        "owner_id": "alice",
        "symbol": "AAPL",
        "side": "BUY",
        "entry_date": datetime(2024, 3, 1, 14, 30),
        "entry_price": Decimal("150.50"),
        "quantity": Decimal("100"),
    }
    data.update(overrides)
    return Trade(**data)


class TestDatabaseSchemaCompleteness:
    """
    *For any* fresh database, the trades table exists.
    """

    def test_schema_completeness(self, temp_db: DataStore):
        tables = temp_db.get_tables()
        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_reopen_keeps_data(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "test.db"
            DataStore(db_path).add_trade(make_trade())
            assert len(DataStore(db_path).get_trades("alice")) == 1

    def test_stats(self, temp_db: DataStore):
        temp_db.add_trade(make_trade())
        assert temp_db.get_stats() == {"trades": 1}


class TestTradeRoundTrip:
    """
    *For any* stored trade, reading it back yields an equal trade with
    exact decimal values.
    """

    @given(
        entry_price=st.decimals(min_value="0", max_value="1000000", places=6),
        quantity=st.decimals(min_value="0.000001", max_value="1000000", places=6),
        commission=st.decimals(min_value="0", max_value="1000", places=4),
    )
    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_decimal_precision(self, temp_db: DataStore, entry_price, quantity, commission):
        trade = make_trade(entry_price=entry_price, quantity=quantity, commission=commission)
        stored = temp_db.get_trade("alice", temp_db.add_trade(trade))

        assert stored.entry_price == entry_price
        assert stored.quantity == quantity
        assert stored.commission == commission

    def test_all_fields(self, temp_db: DataStore):
        trade = make_trade(
            strategy="breakout",
            exit_date=datetime(2024, 3, 5, 10, 0),
            exit_price=Decimal("158.75"),
            status="CLOSED",
            fees=Decimal("0.50"),
            manual_profit=Decimal("-12.5"),
            stop_loss=Decimal("145"),
            take_profit=Decimal("160"),
            notes="earnings run",
            tags=["swing", "earnings"],
        )
        trade_id = temp_db.add_trade(trade)
        stored = temp_db.get_trade("alice", trade_id)

        assert stored.model_dump() == {**trade.model_dump(), "id": trade_id}


class TestQueries:
    """Trades are scoped to an owner and filtered in the query."""

    def test_owner_isolation(self, temp_db: DataStore):
        trade_id = temp_db.add_trade(make_trade())
        temp_db.add_trade(make_trade(owner_id="bob"))

        assert [t.owner_id for t in temp_db.get_trades("alice")] == ["alice"]
        with pytest.raises(TradeNotFoundError):
            temp_db.get_trade("bob", trade_id)

    def test_ordered_by_entry_date(self, temp_db: DataStore):
        temp_db.add_trade(make_trade(symbol="LATE", entry_date=datetime(2024, 3, 9)))
        temp_db.add_trade(make_trade(symbol="EARLY", entry_date=datetime(2024, 3, 2)))
        assert [t.symbol for t in temp_db.get_trades("alice")] == ["EARLY", "LATE"]

    def test_window_filter_is_half_open(self, temp_db: DataStore):
        for day in (1, 15, 31):
            temp_db.add_trade(make_trade(entry_date=datetime(2024, 3, day, 9)))
        temp_db.add_trade(make_trade(entry_date=datetime(2024, 4, 1)))

        window = TimeWindow(start=datetime(2024, 3, 1), end=datetime(2024, 4, 1))
        assert len(temp_db.get_trades("alice", window=window)) == 3

    def test_symbol_and_status_filters(self, temp_db: DataStore):
        temp_db.add_trade(make_trade())
        temp_db.add_trade(make_trade(symbol="MSFT", status="CANCELLED"))

        assert len(temp_db.get_trades("alice", symbol=" msft ")) == 1
        assert len(temp_db.get_trades("alice", status="open")) == 1
        assert temp_db.get_trades("alice", symbol="MSFT", status="OPEN") == []


class TestWrites:
    """Updates, bulk close and delete."""

    def test_update_trade(self, temp_db: DataStore):
        trade_id = temp_db.add_trade(make_trade())
        stored = temp_db.get_trade("alice", trade_id)
        temp_db.update_trade(stored.cancel())

        assert temp_db.get_trade("alice", trade_id).status == "CANCELLED"

    def test_update_missing_trade(self, temp_db: DataStore):
        with pytest.raises(TradeNotFoundError):
            temp_db.update_trade(make_trade(id=42))

    def test_close_trades_skips_non_open(self, temp_db: DataStore):
        first = temp_db.add_trade(make_trade())
        second = temp_db.add_trade(make_trade())
        cancelled = temp_db.add_trade(make_trade(status="CANCELLED"))
        other_owner = temp_db.add_trade(make_trade(owner_id="bob"))

        exit_date = datetime(2024, 3, 4, 16, 0)
        closed = temp_db.close_trades(
            "alice", [first, second, cancelled, other_owner, 999], Decimal("155"), exit_date
        )

        assert closed == 2
        stored = temp_db.get_trade("alice", first)
        assert stored.status == "CLOSED"
        assert stored.exit_price == Decimal("155")
        assert stored.exit_date == exit_date
        assert temp_db.get_trade("alice", cancelled).status == "CANCELLED"
        assert temp_db.get_trade("bob", other_owner).status == "OPEN"

    def test_delete_trade(self, temp_db: DataStore):
        trade_id = temp_db.add_trade(make_trade())
        temp_db.delete_trade("alice", trade_id)

        assert temp_db.get_trades("alice") == []
        with pytest.raises(TradeNotFoundError):
            temp_db.delete_trade("alice", trade_id)
