"""Export command for TradeJournal CLI."""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from tradejournal.analytics.export import export_csv, export_filename, export_records
from tradejournal.cli.common import (
    console,
    get_settings,
    handle_errors,
    open_store,
    period_options,
    resolve_window,
)


@click.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "json"], case_sensitive=False),
    default="csv",
    help="Output format (default: csv).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
@click.option(
    "--auto-name",
    is_flag=True,
    default=False,
    help="Write CSV to trades_export_<today>.csv in the current directory.",
)
@period_options
@handle_errors
def export(
    fmt: str,
    output: Optional[Path],
    auto_name: bool,
    period: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> None:
    """Export trades as CSV or JSON, newest first.

    \b
    Examples:
      tradejournal export > trades.csv
      tradejournal export --auto-name --period year
      tradejournal export --format json -o trades.json
    """
    settings = get_settings()
    store = open_store(settings)

    window, _ = resolve_window(period, start_date, end_date, datetime.now())
    trades = store.get_trades(settings.owner_id, window=window)

    if fmt.lower() == "json":
        payload = {
            "results": len(trades),
            "export_date": datetime.now().isoformat(),
            "trades": export_records(trades, settings.auto_calculate_profit),
        }
        text = json.dumps(payload, indent=2) + "\n"
    else:
        text = export_csv(trades, settings.auto_calculate_profit)

    if auto_name and output is None:
        output = Path(export_filename(date.today()))

    if output is None:
        click.echo(text, nl=False)
        return

    output.write_text(text)
    console.print(f"[green]Exported {len(trades)} trade(s) to[/green] {output}")
