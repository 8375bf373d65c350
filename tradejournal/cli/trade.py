"""Trade record commands for TradeJournal CLI.

Handles adding, closing, cancelling, deleting and listing trades.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tradejournal.analytics.pnl import calculate_trade_metrics
from tradejournal.cli.common import (
    DATE_FORMATS,
    DECIMAL,
    console,
    fmt_money,
    fmt_pct,
    get_settings,
    handle_errors,
    open_store,
    period_options,
    resolve_window,
)
from tradejournal.models import Trade


@click.command()
@click.option("--symbol", "-s", required=True, help="Trading symbol.")
@click.option(
    "--side",
    type=click.Choice(["BUY", "SELL"], case_sensitive=False),
    required=True,
    help="BUY for long, SELL for short.",
)
@click.option("--entry-price", type=DECIMAL, required=True, help="Entry price.")
@click.option("--quantity", "-q", type=DECIMAL, required=True, help="Position size.")
@click.option(
    "--entry-date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Entry date/time (default: now).",
)
@click.option("--strategy", default=None, help="Strategy name.")
@click.option("--commission", type=DECIMAL, default="0", help="Commission paid.")
@click.option("--fees", type=DECIMAL, default="0", help="Other fees paid.")
@click.option("--stop-loss", type=DECIMAL, default=None, help="Stop loss price.")
@click.option("--take-profit", type=DECIMAL, default=None, help="Take profit price.")
@click.option("--exit-price", type=DECIMAL, default=None, help="Exit price (records a closed trade).")
@click.option(
    "--exit-date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Exit date/time (default: now when --exit-price is given).",
)
@click.option("--profit", type=DECIMAL, default=None, help="Manually entered profit.")
@click.option("--notes", default=None, help="Notes about the trade.")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable).")
@handle_errors
def add(
    symbol: str,
    side: str,
    entry_price: Decimal,
    quantity: Decimal,
    entry_date: Optional[datetime],
    strategy: Optional[str],
    commission: Decimal,
    fees: Decimal,
    stop_loss: Optional[Decimal],
    take_profit: Optional[Decimal],
    exit_price: Optional[Decimal],
    exit_date: Optional[datetime],
    profit: Optional[Decimal],
    notes: Optional[str],
    tags: tuple[str, ...],
) -> None:
    """Log a new trade.

    Without --exit-price the trade is recorded as OPEN.

    \b
    Examples:
      tradejournal add -s AAPL --side BUY --entry-price 150.50 -q 100
      tradejournal add -s TSLA --side SELL --entry-price 250 -q 10 \\
          --exit-price 240 --commission 1.5 --strategy breakout
    """
    settings = get_settings()
    store = open_store(settings)

    closed = exit_price is not None
    trade = Trade(
        owner_id=settings.owner_id,
        symbol=symbol,
        side=side.upper(),
        strategy=strategy,
        entry_date=entry_date or datetime.now(),
        entry_price=entry_price,
        quantity=quantity,
        exit_price=exit_price,
        exit_date=(exit_date or datetime.now()) if closed else exit_date,
        status="CLOSED" if closed else "OPEN",
        commission=commission,
        fees=fees,
        manual_profit=profit,
        stop_loss=stop_loss,
        take_profit=take_profit,
        notes=notes,
        tags=list(tags),
    )
    trade_id = store.add_trade(trade)

    text = (
        f"[bold]Trade #{trade_id}[/bold] {trade.side} {trade.quantity} "
        f"{escape(trade.symbol)} @ {settings.currency_symbol}{trade.entry_price}\n"
        f"Status: {trade.status}"
    )
    if closed:
        metrics = calculate_trade_metrics(trade, settings.auto_calculate_profit)
        text += (
            f"\nProfit: {fmt_money(metrics.profit, settings.currency_symbol)} "
            f"({fmt_pct(metrics.profit_percentage)})"
        )

    console.print(Panel(text, title="[bold green]Trade Logged[/bold green]", border_style="green"))


@click.command()
@click.argument("trade_ids", nargs=-1, type=int, required=True)
@click.option("--exit-price", type=DECIMAL, required=True, help="Exit price.")
@click.option(
    "--exit-date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Exit date/time (default: now).",
)
@handle_errors
def close(trade_ids: tuple[int, ...], exit_price: Decimal, exit_date: Optional[datetime]) -> None:
    """Close one or more OPEN trades at an exit price.

    \b
    Examples:
      tradejournal close 3 --exit-price 158.75
      tradejournal close 3 4 5 --exit-price 12.10 --exit-date 2024-03-01
    """
    settings = get_settings()
    store = open_store(settings)

    closed = store.close_trades(settings.owner_id, list(trade_ids), exit_price, exit_date)

    if closed == 0:
        console.print(Panel(
            "[yellow]No open trade found with the given ID(s)[/yellow]",
            title="[bold yellow]Close[/bold yellow]",
            border_style="yellow",
        ))
        raise SystemExit(1)

    console.print(Panel(
        f"[green]{closed} trade(s) closed successfully[/green]",
        title="[bold cyan]Close[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("trade_id", type=int)
@handle_errors
def cancel(trade_id: int) -> None:
    """Mark an OPEN trade as cancelled.

    \b
    Examples:
      tradejournal cancel 7
    """
    settings = get_settings()
    store = open_store(settings)

    trade = store.get_trade(settings.owner_id, trade_id)
    store.update_trade(trade.cancel())
    console.print(f"[green]Trade #{trade_id} cancelled[/green]")


@click.command()
@click.argument("trade_id", type=int)
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation.")
@handle_errors
def delete(trade_id: int, yes: bool) -> None:
    """Delete a trade permanently.

    \b
    Examples:
      tradejournal delete 7
      tradejournal delete 7 --yes
    """
    settings = get_settings()
    store = open_store(settings)

    trade = store.get_trade(settings.owner_id, trade_id)
    if not yes:
        click.confirm(
            f"Delete trade #{trade_id} ({trade.side} {trade.symbol})?", abort=True
        )

    store.delete_trade(settings.owner_id, trade_id)
    console.print(f"[green]Trade #{trade_id} deleted[/green]")


@click.command()
@click.argument("trade_id", type=int)
@handle_errors
def show(trade_id: int) -> None:
    """Show one trade with its computed P&L.

    \b
    Examples:
      tradejournal show 3
    """
    settings = get_settings()
    store = open_store(settings)
    currency = settings.currency_symbol

    trade = store.get_trade(settings.owner_id, trade_id)
    metrics = calculate_trade_metrics(trade, settings.auto_calculate_profit)

    lines = [
        f"[bold]{escape(trade.symbol)}[/bold] {trade.side}  [dim]{trade.status}[/dim]",
        f"Strategy:    {escape(trade.strategy or '-')}",
        "",
        f"Entry:       {trade.entry_date:%Y-%m-%d %H:%M}  @ {currency}{trade.entry_price}",
        f"Quantity:    {trade.quantity}",
    ]
    if trade.exit_date is not None:
        lines.append(
            f"Exit:        {trade.exit_date:%Y-%m-%d %H:%M}  @ {currency}{trade.exit_price}"
        )
    lines.append(f"Costs:       {currency}{trade.costs}")
    if trade.stop_loss is not None or trade.take_profit is not None:
        lines.append(
            f"Stop / Target: {trade.stop_loss or '-'} / {trade.take_profit or '-'}"
        )
    if trade.status == "CLOSED":
        lines += [
            "",
            f"Profit:      {fmt_money(metrics.profit, currency)} ({fmt_pct(metrics.profit_percentage)})",
            f"Held:        {metrics.duration_days} day(s)",
        ]
    if trade.tags:
        lines.append(f"Tags:        {escape(', '.join(trade.tags))}")
    if trade.notes:
        lines += ["", escape(trade.notes)]

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold cyan]Trade #{trade_id}[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@period_options
@click.option("--symbol", "-s", default=None, help="Only this symbol.")
@click.option(
    "--status",
    type=click.Choice(["OPEN", "CLOSED", "CANCELLED"], case_sensitive=False),
    default=None,
    help="Only trades with this status.",
)
@handle_errors
def journal(
    period: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    symbol: Optional[str],
    status: Optional[str],
) -> None:
    """List trades with their P&L.

    \b
    Examples:
      tradejournal journal
      tradejournal journal --period week
      tradejournal journal --symbol AAPL --status closed
    """
    settings = get_settings()
    store = open_store(settings)
    currency = settings.currency_symbol

    window, label = resolve_window(period, start_date, end_date, datetime.now())
    trades = store.get_trades(settings.owner_id, window=window, symbol=symbol, status=status)

    if not trades:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trade Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title=f"Trade Journal - {label}",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", justify="right", style="dim")
    table.add_column("Entry", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Side", justify="center")
    table.add_column("Qty", justify="right")
    table.add_column("Entry Px", justify="right")
    table.add_column("Exit Px", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("P&L", justify="right")
    table.add_column("Strategy", max_width=20)

    for trade in trades:
        metrics = calculate_trade_metrics(trade, settings.auto_calculate_profit)
        side_color = "green" if trade.side == "BUY" else "red"
        table.add_row(
            str(trade.id),
            trade.entry_date.strftime("%Y-%m-%d %H:%M"),
            escape(trade.symbol),
            f"[{side_color}]{trade.side}[/{side_color}]",
            str(trade.quantity),
            f"{currency}{trade.entry_price:,.2f}",
            f"{currency}{trade.exit_price:,.2f}" if trade.exit_price is not None else "-",
            trade.status,
            fmt_money(metrics.profit, currency) if trade.status == "CLOSED" else "-",
            escape(trade.strategy or "-"),
        )

    console.print(table)
    console.print(f"\n[bold]Total Trades:[/bold] {len(trades)}")
