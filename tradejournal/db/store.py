"""SQLite data store for TradeJournal."""

import json
import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

from tradejournal.exceptions import TradeNotFoundError
from tradejournal.models import TimeWindow, Trade

logger = logging.getLogger(__name__)

TRADE_COLUMNS = (
    "id",
    "owner_id",
    "symbol",
    "side",
    "strategy",
    "entry_date",
    "entry_price",
    "quantity",
    "exit_date",
    "exit_price",
    "status",
    "commission",
    "fees",
    "manual_profit",
    "stop_loss",
    "take_profit",
    "notes",
    "tags",
)


def _decimal_or_none(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _text_or_none(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return format(value, "f")
    return value.isoformat()


class DataStore:
    """SQLite-based trade store.

    Monetary values are stored as TEXT so Decimals survive the round trip
    without float conversion.
    """

    REQUIRED_TABLES = ["trades"]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    side TEXT NOT NULL,
                    strategy TEXT,
                    entry_date TEXT NOT NULL,
                    entry_price TEXT NOT NULL,
                    quantity TEXT NOT NULL,
                    exit_date TEXT,
                    exit_price TEXT,
                    status TEXT NOT NULL DEFAULT 'OPEN',
                    commission TEXT NOT NULL DEFAULT '0',
                    fees TEXT NOT NULL DEFAULT '0',
                    manual_profit TEXT,
                    stop_loss TEXT,
                    take_profit TEXT,
                    notes TEXT,
                    tags TEXT NOT NULL DEFAULT '[]'
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_owner_entry "
                "ON trades (owner_id, entry_date)"
            )
            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> Trade:
        return Trade(
            id=row["id"],
            owner_id=row["owner_id"],
            symbol=row["symbol"],
            side=row["side"],
            strategy=row["strategy"],
            entry_date=datetime.fromisoformat(row["entry_date"]),
            entry_price=Decimal(row["entry_price"]),
            quantity=Decimal(row["quantity"]),
            exit_date=(
                datetime.fromisoformat(row["exit_date"]) if row["exit_date"] else None
            ),
            exit_price=_decimal_or_none(row["exit_price"]),
            status=row["status"],
            commission=Decimal(row["commission"]),
            fees=Decimal(row["fees"]),
            manual_profit=_decimal_or_none(row["manual_profit"]),
            stop_loss=_decimal_or_none(row["stop_loss"]),
            take_profit=_decimal_or_none(row["take_profit"]),
            notes=row["notes"],
            tags=json.loads(row["tags"]),
        )

    @staticmethod
    def _trade_values(trade: Trade) -> tuple:
        return (
            trade.owner_id,
            trade.symbol,
            trade.side,
            trade.strategy,
            trade.entry_date.isoformat(),
            _text_or_none(trade.entry_price),
            _text_or_none(trade.quantity),
            _text_or_none(trade.exit_date),
            _text_or_none(trade.exit_price),
            trade.status,
            _text_or_none(trade.commission),
            _text_or_none(trade.fees),
            _text_or_none(trade.manual_profit),
            _text_or_none(trade.stop_loss),
            _text_or_none(trade.take_profit),
            trade.notes,
            json.dumps(trade.tags),
        )

    # ==================== Trades ====================

    def add_trade(self, trade: Trade) -> int:
        """Insert a trade.

        Args:
            trade: Trade to store. Its ``id`` is ignored.

        Returns:
            The ID of the new trade.
        """
        columns = ", ".join(TRADE_COLUMNS[1:])
        placeholders = ", ".join("?" for _ in TRADE_COLUMNS[1:])
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO trades ({columns}) VALUES ({placeholders})",
                self._trade_values(trade),
            )
            conn.commit()
            trade_id = cursor.lastrowid or 0
        finally:
            conn.close()

        logger.info("Added trade %d (%s %s)", trade_id, trade.side, trade.symbol)
        return trade_id

    def get_trade(self, owner_id: str, trade_id: int) -> Trade:
        """Get one trade.

        Raises:
            TradeNotFoundError: If the owner has no trade with this ID.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(TRADE_COLUMNS)} FROM trades WHERE id = ? AND owner_id = ?",
                (trade_id, owner_id),
            )
            row = cursor.fetchone()
        finally:
            conn.close()

        if row is None:
            raise TradeNotFoundError(trade_id)
        return self._row_to_trade(row)

    def get_trades(
        self,
        owner_id: str,
        window: Optional[TimeWindow] = None,
        symbol: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Trade]:
        """Get an owner's trades ordered by entry date.

        Args:
            owner_id: Owner whose trades are returned.
            window: Optional entry-date window.
            symbol: Optional symbol filter (case-insensitive).
            status: Optional status filter.

        Returns:
            List of trades.
        """
        clauses = ["owner_id = ?"]
        params: list = [owner_id]
        if window is not None:
            clauses.append("entry_date >= ? AND entry_date < ?")
            params.extend([window.start.isoformat(), window.end.isoformat()])
        if symbol:
            clauses.append("symbol = ?")
            params.append(symbol.strip().upper())
        if status:
            clauses.append("status = ?")
            params.append(status.upper())

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {', '.join(TRADE_COLUMNS)}
                FROM trades
                WHERE {' AND '.join(clauses)}
                ORDER BY entry_date, id
                """,
                params,
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        logger.debug("Loaded %d trades for %s", len(rows), owner_id)
        return [self._row_to_trade(row) for row in rows]

    def update_trade(self, trade: Trade) -> None:
        """Replace a stored trade with ``trade`` (matched on id and owner).

        Raises:
            TradeNotFoundError: If no stored trade matches.
        """
        assignments = ", ".join(f"{column} = ?" for column in TRADE_COLUMNS[1:])
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE trades SET {assignments} WHERE id = ? AND owner_id = ?",
                (*self._trade_values(trade), trade.id, trade.owner_id),
            )
            conn.commit()
            updated = cursor.rowcount
        finally:
            conn.close()

        if not updated:
            raise TradeNotFoundError(trade.id)
        logger.info("Updated trade %d", trade.id)

    def close_trades(
        self,
        owner_id: str,
        trade_ids: list[int],
        exit_price: Decimal,
        exit_date: Optional[datetime] = None,
    ) -> int:
        """Close several OPEN trades at the same exit price.

        Trades that are missing or not OPEN are skipped.

        Returns:
            Number of trades closed.
        """
        exit_date = exit_date or datetime.now()
        closed = 0
        for trade in self.get_trades(owner_id, status="OPEN"):
            if trade.id in trade_ids:
                self.update_trade(trade.close(exit_price, exit_date))
                closed += 1
        logger.info("Closed %d of %d requested trades", closed, len(trade_ids))
        return closed

    def delete_trade(self, owner_id: str, trade_id: int) -> None:
        """Delete a trade.

        Raises:
            TradeNotFoundError: If the owner has no trade with this ID.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE id = ? AND owner_id = ?", (trade_id, owner_id)
            )
            conn.commit()
            deleted = cursor.rowcount
        finally:
            conn.close()

        if not deleted:
            raise TradeNotFoundError(trade_id)
        logger.info("Deleted trade %d", trade_id)

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with record counts for every table in the database.
        """
        tables = self.get_tables()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in tables:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
