"""Setup commands for TradeJournal CLI.

Creates and displays the configuration file.
"""

import click
from rich.panel import Panel

from tradejournal.cli.common import console, handle_errors
from tradejournal.config import (
    create_template_config,
    get_config_path,
    get_data_store,
    get_db_path,
    load_settings,
)


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config.")
def init(force: bool) -> None:
    """Create a template configuration file.

    \b
    Examples:
      tradejournal init
      tradejournal init --force
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists at[/yellow] {config_path}\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold yellow]Init[/bold yellow]",
            border_style="yellow",
        ))
        return

    path = create_template_config(config_path)
    console.print(Panel(
        f"[green]Created config:[/green] {path}\n\n"
        "Set [cyan]auto_calculate_profit = false[/cyan] under [cyan]\\[journal][/cyan]\n"
        "to enter profits by hand instead.",
        title="[bold cyan]Init[/bold cyan]",
        border_style="cyan",
    ))


@click.command(name="settings")
@handle_errors
def show_settings() -> None:
    """Show the active settings.

    \b
    Examples:
      tradejournal settings
    """
    current = load_settings()
    profit_mode = (
        "[green]automatic[/green]" if current.auto_calculate_profit else "[yellow]manual[/yellow]"
    )
    counts = get_data_store(current).get_stats()
    records = ", ".join(f"{table}: {count}" for table, count in sorted(counts.items()))
    console.print(Panel(
        f"Config file: {get_config_path()}\n"
        f"Database:    {get_db_path(current)}\n"
        f"Records:     {records}\n\n"
        f"Owner:       {current.owner_id}\n"
        f"Profit:      {profit_mode}\n"
        f"Currency:    {current.currency_symbol}",
        title="[bold cyan]Settings[/bold cyan]",
        border_style="cyan",
    ))
