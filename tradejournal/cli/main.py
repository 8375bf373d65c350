"""Main CLI entry point for TradeJournal.

This module provides the main click group and lazy loading
of command modules to keep startup fast.
"""

import importlib
import logging

import click
from rich.console import Console
from rich.logging import RichHandler


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their commands
    is actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                cmd = attr
                break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    # Setup
    "init": "tradejournal.cli.settings",
    "settings": "tradejournal.cli.settings",
    # Trade records
    "add": "tradejournal.cli.trade",
    "close": "tradejournal.cli.trade",
    "cancel": "tradejournal.cli.trade",
    "delete": "tradejournal.cli.trade",
    "show": "tradejournal.cli.trade",
    "journal": "tradejournal.cli.trade",
    # Reports
    "stats": "tradejournal.cli.report",
    "report": "tradejournal.cli.report",
    "breakdown": "tradejournal.cli.report",
    "compare": "tradejournal.cli.report",
    "daily": "tradejournal.cli.report",
    "monthly": "tradejournal.cli.report",
    "symbol": "tradejournal.cli.report",
    # Export
    "export": "tradejournal.cli.export",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TradeJournal - log your trades and analyze your performance.

    Record buys and sells, close them when you exit, and get P&L,
    win rate, profit factor and period-over-period reports.

    \b
    Quick Start:
      tradejournal init                      # Create a config file
      tradejournal add -s AAPL --side BUY --entry-price 150.5 -q 100
      tradejournal close 1 --exit-price 158.75
      tradejournal report --period month
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
