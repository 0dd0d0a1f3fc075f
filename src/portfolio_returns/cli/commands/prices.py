"""Price fetching commands."""

import typer
from rich.console import Console
from rich.table import Table

from ...core.calculator import ReturnCalculator
from ...core.registry import ticker_for
from ...external.refresh import refresh_prices
from .loader import seed_calculator

app = typer.Typer(help="Fetch and view prices")
console = Console()


def _print_prices(calc: ReturnCalculator, title: str, failed=()) -> None:
    table = Table(title=title)
    table.add_column("Asset", style="bold")
    table.add_column("Name")
    table.add_column("Ticker")
    table.add_column("Price", justify="right")
    table.add_column("Status")
    for asset, info in calc.assets.items():
        price = calc.prices.get(asset)
        status = "[red]FAILED[/red]" if asset in failed else "[green]OK[/green]"
        table.add_row(
            asset,
            info.get("name", "—"),
            ticker_for(asset, calc.assets),
            f"{price:,.4f}" if price is not None else "—",
            status if price is not None else "[red]missing[/red]",
        )
    console.print(table)


@app.command("show")
def show():
    """Show the configured seed prices."""
    _print_prices(seed_calculator(console), "Seed Prices (config.json)")


@app.command("fetch")
def fetch():
    """Fetch latest prices for all registered assets via yfinance."""
    calc = seed_calculator(console)
    console.print(f"Fetching prices for {len(calc.assets)} assets...")
    failed = refresh_prices(calc)
    _print_prices(calc, "Fetched Prices", failed)
    if failed:
        raise typer.Exit(1)
