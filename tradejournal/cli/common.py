"""Shared helpers for TradeJournal CLI commands."""

import functools
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from tradejournal.analytics.periods import PERIODS, period_label, resolve_period
from tradejournal.config import JournalSettings, get_data_store, load_settings
from tradejournal.exceptions import JournalError
from tradejournal.models import SummaryStatistics, TimeWindow

console = Console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"]


class DecimalType(click.ParamType):
    """Click parameter type producing Decimal values."""

    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)


DECIMAL = DecimalType()


def print_error(message: str, title: str = "Error") -> None:
    """Print an error panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def handle_errors(func):
    """Render journal and validation errors as panels and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            messages = "\n".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'trade'}: {err['msg']}"
                for err in e.errors()
            )
            print_error(messages, title="Invalid Trade")
            raise SystemExit(1)
        except JournalError as e:
            print_error(str(e))
            raise SystemExit(1)

    return wrapper


def get_settings() -> JournalSettings:
    return load_settings()


def open_store(settings: JournalSettings):
    return get_data_store(settings)


def period_options(func):
    """Add --period/--from/--to options to a command."""
    func = click.option(
        "--to",
        "end_date",
        type=click.DateTime(formats=DATE_FORMATS[:1]),
        default=None,
        help="Last entry date to include (YYYY-MM-DD).",
    )(func)
    func = click.option(
        "--from",
        "start_date",
        type=click.DateTime(formats=DATE_FORMATS[:1]),
        default=None,
        help="First entry date to include (YYYY-MM-DD).",
    )(func)
    func = click.option(
        "--period",
        type=click.Choice(PERIODS, case_sensitive=False),
        default=None,
        help="Named period (default: all).",
    )(func)
    return func


def resolve_window(
    period: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    now: datetime,
) -> tuple[Optional[TimeWindow], str]:
    """Turn CLI period options into a window and a label.

    An explicit --from/--to range wins over --period. Both ends of the range
    are whole calendar days.
    """
    if start_date or end_date:
        if not (start_date and end_date):
            raise click.UsageError("--from and --to must be given together")
        if end_date < start_date:
            raise click.UsageError("--to must not be before --from")
        window = TimeWindow(start=start_date, end=end_date + timedelta(days=1))
        return window, period_label(window=window)
    if period:
        name = period.lower()
        return resolve_period(name, now), period_label(name=name)
    return None, period_label()


def parse_month(value: Optional[str], now: datetime) -> tuple[int, int]:
    """Parse YYYY-MM, defaulting to the month of ``now``."""
    if not value:
        return now.year, now.month
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError:
        raise click.BadParameter(f"Invalid month '{value}'. Use YYYY-MM") from None
    return parsed.year, parsed.month


# ==================== Formatting ====================

def fmt_money(value: Decimal, currency: str = "$", color: bool = True) -> str:
    """Signed money amount, colored green/red."""
    sign = "+" if value >= 0 else "-"
    text = f"{sign}{currency}{abs(value):,.2f}"
    if not color:
        return text
    style = "green" if value >= 0 else "red"
    return f"[{style}]{text}[/{style}]"


def fmt_pct(value: Decimal) -> str:
    return f"{value:.2f}%"


def fmt_ratio(value: Optional[Decimal]) -> str:
    """Profit factor; None means no losses to divide by."""
    if value is None:
        return "∞"
    return f"{value:.2f}"


def summary_text(stats: SummaryStatistics, currency: str) -> str:
    """Multi-line summary block used by several report commands."""
    lines = [
        f"[bold]Trades:[/bold] {stats.total_trades} "
        f"(open {stats.open_trades}, closed {stats.closed_trades}, "
        f"cancelled {stats.cancelled_trades})",
        f"[bold]Wins / Losses:[/bold] {stats.winning_trades}W / {stats.losing_trades}L"
        f"   Win Rate: {fmt_pct(stats.win_rate)}",
        "",
        f"Total Profit:   {fmt_money(stats.total_profit, currency)}",
        f"Commissions:    {currency}{stats.total_commissions:,.2f}",
        f"Net Profit:     {fmt_money(stats.net_profit, currency)}",
        f"Average Profit: {fmt_money(stats.average_profit, currency)}",
        f"Biggest Win:    {fmt_money(stats.biggest_win, currency)}",
        f"Biggest Loss:   {fmt_money(stats.biggest_loss, currency)}",
        "",
        f"Profit Factor:  {fmt_ratio(stats.profit_factor)}",
        f"Payoff Ratio:   {stats.payoff_ratio:.2f}",
        f"Max Drawdown:   {currency}{stats.max_drawdown:,.2f}",
        f"Volume:         {currency}{stats.total_volume:,.2f}",
        f"ROI:            {fmt_pct(stats.roi)}",
        f"Avg Hold:       {stats.average_hold_duration_days:.1f} days",
    ]
    return "\n".join(lines)
