"""Trade export to CSV text and JSON-ready records."""

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from tradejournal.analytics.pnl import calculate_trade_metrics
from tradejournal.models import Trade

EXPORT_COLUMNS = (
    "Symbol",
    "Side",
    "Strategy",
    "Entry Date",
    "Entry Price",
    "Exit Date",
    "Exit Price",
    "Quantity",
    "Profit",
    "Status",
    "Notes",
)

FIELD_SEPARATOR = ","
SEPARATOR_PLACEHOLDER = ";"


def _clean_text(value: Optional[str]) -> str:
    """Make free text safe for a single CSV field on a single line."""
    if not value:
        return ""
    text = value.replace(FIELD_SEPARATOR, SEPARATOR_PLACEHOLDER)
    return text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else ""


def _format_number(value: Optional[Decimal]) -> str:
    return format(value, "f") if value is not None else ""


def _newest_first(trades: Iterable[Trade]) -> list[Trade]:
    return sorted(trades, key=lambda trade: trade.entry_date, reverse=True)


def export_row(trade: Trade, auto_calculate_profit: bool) -> list[str]:
    """Render one trade as CSV fields in :data:`EXPORT_COLUMNS` order."""
    profit = calculate_trade_metrics(trade, auto_calculate_profit).profit
    return [
        trade.symbol,
        trade.side,
        _clean_text(trade.strategy),
        _format_date(trade.entry_date),
        _format_number(trade.entry_price),
        _format_date(trade.exit_date),
        _format_number(trade.exit_price),
        _format_number(trade.quantity),
        _format_number(profit),
        trade.status,
        _clean_text(trade.notes),
    ]


def export_csv(trades: Iterable[Trade], auto_calculate_profit: bool) -> str:
    """Render trades as CSV text, newest entry first.

    The header is always :data:`EXPORT_COLUMNS`. Commas inside text fields
    become ``;`` and line breaks become spaces, so every record is exactly
    one line with a fixed number of fields. Fields holding a quote character
    are quoted by the csv writer.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=FIELD_SEPARATOR, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for trade in _newest_first(trades):
        writer.writerow(export_row(trade, auto_calculate_profit))
    return buf.getvalue()


def export_records(
    trades: Iterable[Trade], auto_calculate_profit: bool
) -> list[dict[str, Any]]:
    """Trades as JSON-ready dictionaries, newest entry first.

    Each record is the stored trade plus its computed ``profit``,
    ``profit_percentage`` and ``duration_days``.
    """
    records = []
    for trade in _newest_first(trades):
        metrics = calculate_trade_metrics(trade, auto_calculate_profit)
        record = trade.model_dump(mode="json")
        record.update(metrics.model_dump(mode="json"))
        records.append(record)
    return records


def export_filename(day: date) -> str:
    """Default file name for a CSV export made on ``day``."""
    return f"trades_export_{day:%Y-%m-%d}.csv"
