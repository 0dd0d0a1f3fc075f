"""Portfolio Returns CLI entry point."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.config import get_config
from .commands import holdings, ledger, prices, rates, returns, setup

app = typer.Typer(
    name="pr",
    help="Multi-currency portfolio return calculator (TWR / MWR in CNY)",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(returns.app, name="returns", help="Time- and money-weighted returns")
app.add_typer(holdings.app, name="holdings", help="Positions derived from a ledger")
app.add_typer(rates.app, name="rates", help="Exchange rates into CNY")
app.add_typer(prices.app, name="prices", help="Latest asset prices")
app.add_typer(ledger.app, name="ledger", help="Check ledger files")
app.add_typer(setup.app, name="setup", help="Settings and asset registry")


@app.callback()
def startup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """Configure logging from config.json (or --verbose)."""
    level = "DEBUG" if verbose else get_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
