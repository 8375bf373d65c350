"""Reporting commands for TradeJournal CLI.

Summary statistics, full performance reports, breakdowns by symbol,
strategy or calendar period, and period-over-period comparison.
"""

import json
from datetime import datetime, timedelta
from typing import Optional

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tradejournal.analytics.comparison import compare_months, compare_periods
from tradejournal.analytics.grouping import group_trades
from tradejournal.analytics.reports import (
    daily_report,
    generate_report,
    monthly_report,
    symbol_report,
)
from tradejournal.analytics.summary import summarize
from tradejournal.cli.common import (
    DATE_FORMATS,
    console,
    fmt_money,
    fmt_pct,
    fmt_ratio,
    get_settings,
    handle_errors,
    open_store,
    parse_month,
    period_options,
    resolve_window,
    summary_text,
)
from tradejournal.models import GroupBreakdown, MetricDelta, TimeWindow

json_option = click.option(
    "--json", "as_json", is_flag=True, default=False, help="Print JSON instead of tables."
)


def _breakdown_table(title: str, groups: list[GroupBreakdown], currency: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Key", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("Closed", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Total P&L", justify="right")
    table.add_column("Avg P&L", justify="right")
    table.add_column("Profit Factor", justify="right")

    for group in groups:
        summary = group.statistics
        table.add_row(
            escape(group.key) if group.key is not None else "[dim](none)[/dim]",
            str(summary.total_trades),
            str(summary.closed_trades),
            fmt_pct(summary.win_rate),
            fmt_money(summary.total_profit, currency),
            fmt_money(summary.average_profit, currency),
            fmt_ratio(summary.profit_factor),
        )
    return table


@click.command()
@period_options
@json_option
@handle_errors
def stats(
    period: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    as_json: bool,
) -> None:
    """Show summary statistics for a period.

    \b
    Examples:
      tradejournal stats
      tradejournal stats --period month
      tradejournal stats --from 2024-01-01 --to 2024-03-31 --json
    """
    settings = get_settings()
    store = open_store(settings)

    window, label = resolve_window(period, start_date, end_date, datetime.now())
    summary = summarize(
        store.get_trades(settings.owner_id, window=window), settings.auto_calculate_profit
    )

    if as_json:
        click.echo(summary.model_dump_json(indent=2))
        return

    console.print(Panel(
        summary_text(summary, settings.currency_symbol),
        title=f"[bold cyan]Statistics - {label}[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@period_options
@json_option
@handle_errors
def report(
    period: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    as_json: bool,
) -> None:
    """Generate a full performance report.

    Includes overall statistics, top 10 symbols, strategies and
    monthly performance for the last 12 months.

    \b
    Examples:
      tradejournal report
      tradejournal report --period quarter
    """
    settings = get_settings()
    store = open_store(settings)
    currency = settings.currency_symbol
    now = datetime.now()

    window, label = resolve_window(period, start_date, end_date, now)
    result = generate_report(
        store.get_trades(settings.owner_id),
        settings.auto_calculate_profit,
        as_of=now,
        window=window,
        label=label,
    )

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    if result.summary.total_trades == 0:
        console.print(Panel(
            f"[dim]No trades found for {label}[/dim]",
            title="[bold]Performance Report[/bold]",
            border_style="dim",
        ))
        return

    console.print(Panel(
        summary_text(result.summary, currency),
        title=f"[bold cyan]Performance Report - {result.period}[/bold cyan]",
        border_style="cyan",
    ))
    console.print(_breakdown_table("Top Symbols", result.top_symbols, currency))
    console.print(_breakdown_table("Strategies", result.strategies, currency))
    if result.monthly_performance:
        console.print(_breakdown_table("Monthly Performance", result.monthly_performance, currency))


@click.command()
@click.option(
    "--by",
    "group_by",
    type=click.Choice(["symbol", "strategy", "day", "month", "year"], case_sensitive=False),
    default="symbol",
    help="Grouping key (default: symbol).",
)
@click.option("--top", "top_n", type=click.IntRange(min=1), default=None, help="Show only the first N groups.")
@period_options
@json_option
@handle_errors
def breakdown(
    group_by: str,
    top_n: Optional[int],
    period: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    as_json: bool,
) -> None:
    """Break performance down by symbol, strategy or calendar period.

    Symbols and strategies are ordered by total P&L; calendar
    groupings are ordered chronologically.

    \b
    Examples:
      tradejournal breakdown --by strategy
      tradejournal breakdown --by month --period year
      tradejournal breakdown --by symbol --top 5
    """
    settings = get_settings()
    store = open_store(settings)

    window, label = resolve_window(period, start_date, end_date, datetime.now())
    groups = group_trades(
        store.get_trades(settings.owner_id, window=window),
        group_by.lower(),
        settings.auto_calculate_profit,
        top_n=top_n,
    )

    if as_json:
        click.echo(json.dumps([group.model_dump(mode="json") for group in groups], indent=2))
        return

    if not groups:
        console.print(f"[dim]No trades found for {label}[/dim]")
        return

    console.print(_breakdown_table(
        f"By {group_by.capitalize()} - {label}", groups, settings.currency_symbol
    ))


def _delta_row(name: str, delta: MetricDelta, fmt) -> tuple[str, str, str, str, str]:
    color = "green" if delta.change >= 0 else "red"
    return (
        name,
        fmt(delta.current),
        fmt(delta.previous),
        f"[{color}]{fmt(delta.change)}[/{color}]",
        f"[{color}]{delta.change_percent:+.2f}%[/{color}]",
    )


@click.command()
@click.option("--month", default=None, help="Month to compare with the one before (YYYY-MM).")
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=None,
    help="Compare the last N days with the N days before.",
)
@json_option
@handle_errors
def compare(month: Optional[str], days: Optional[int], as_json: bool) -> None:
    """Compare a period with the one before it.

    Defaults to this calendar month versus last calendar month.

    \b
    Examples:
      tradejournal compare
      tradejournal compare --month 2024-03
      tradejournal compare --days 30
    """
    settings = get_settings()
    store = open_store(settings)
    currency = settings.currency_symbol
    now = datetime.now()

    trades = store.get_trades(settings.owner_id)
    if days is not None:
        end = now + timedelta(microseconds=1)
        current = TimeWindow(start=end - timedelta(days=days), end=end)
        result = compare_periods(trades, current, settings.auto_calculate_profit)
    else:
        year, month_number = parse_month(month, now)
        result = compare_months(trades, year, month_number, settings.auto_calculate_profit)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    table = Table(
        title=(
            f"{result.current_window.start:%Y-%m-%d} onward vs "
            f"{result.previous_window.start:%Y-%m-%d} onward"
        ),
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Metric", style="bold")
    table.add_column("Current", justify="right")
    table.add_column("Previous", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Change %", justify="right")

    table.add_row(*_delta_row("Trades", result.total_trades, lambda v: f"{v:,.0f}"))
    table.add_row(*_delta_row("Profit", result.total_profit, lambda v: fmt_money(v, currency, color=False)))
    table.add_row(*_delta_row("Win Rate", result.win_rate, fmt_pct))

    console.print(table)


@click.command()
@click.option(
    "--date",
    "day",
    type=click.DateTime(formats=DATE_FORMATS[:1]),
    default=None,
    help="Day to report (YYYY-MM-DD, default: today).",
)
@json_option
@handle_errors
def daily(day: Optional[datetime], as_json: bool) -> None:
    """Show the trades and P&L of one day.

    \b
    Examples:
      tradejournal daily
      tradejournal daily --date 2024-03-15
    """
    settings = get_settings()
    store = open_store(settings)
    currency = settings.currency_symbol

    target = (day or datetime.now()).date()
    result = daily_report(
        store.get_trades(settings.owner_id), target, settings.auto_calculate_profit
    )

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    summary = result.summary
    strategies = ", ".join(s for s in result.strategies if s) or "-"
    console.print(Panel(
        f"[bold]{target:%Y-%m-%d}[/bold]\n\n"
        f"Trades: {summary.total_trades} (open {summary.open_trades}, "
        f"closed {summary.closed_trades})\n"
        f"P&L:    {fmt_money(summary.total_profit, currency)}\n"
        f"Symbols:    {escape(', '.join(result.symbols) or '-')}\n"
        f"Strategies: {escape(strategies)}",
        title="[bold cyan]Daily Report[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.option("--month", default=None, help="Month to report (YYYY-MM, default: this month).")
@json_option
@handle_errors
def monthly(month: Optional[str], as_json: bool) -> None:
    """Show a month's performance with daily breakdown.

    \b
    Examples:
      tradejournal monthly
      tradejournal monthly --month 2024-02
    """
    settings = get_settings()
    store = open_store(settings)
    currency = settings.currency_symbol

    year, month_number = parse_month(month, datetime.now())
    result = monthly_report(
        store.get_trades(settings.owner_id), year, month_number, settings.auto_calculate_profit
    )

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    console.print(Panel(
        summary_text(result.summary, currency),
        title=f"[bold cyan]{result.label}[/bold cyan]",
        border_style="cyan",
    ))
    if result.daily_breakdown:
        console.print(_breakdown_table("Daily Breakdown", result.daily_breakdown, currency))

    for title, ranked in (
        ("Top Performers", result.top_performers),
        ("Worst Performers", result.worst_performers),
    ):
        if not ranked:
            continue
        console.print(f"\n[bold]{title}:[/bold]")
        for item in ranked:
            console.print(
                f"  #{item.trade.id} {escape(item.trade.symbol)} "
                f"{fmt_money(item.metrics.profit, currency)} "
                f"({fmt_pct(item.metrics.profit_percentage)})"
            )


@click.command()
@click.argument("ticker")
@json_option
@handle_errors
def symbol(ticker: str, as_json: bool) -> None:
    """Show statistics for one symbol.

    \b
    Examples:
      tradejournal symbol AAPL
    """
    settings = get_settings()
    store = open_store(settings)

    result = symbol_report(
        store.get_trades(settings.owner_id, symbol=ticker),
        ticker,
        settings.auto_calculate_profit,
    )

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    console.print(Panel(
        summary_text(result.statistics, settings.currency_symbol),
        title=f"[bold cyan]{escape(result.symbol)}[/bold cyan]",
        border_style="cyan",
    ))
