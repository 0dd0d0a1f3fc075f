"""Exchange-rate commands."""

import typer
from rich.console import Console
from rich.table import Table

from ...core.calculator import ReturnCalculator
from ...external.refresh import refresh_rates
from .loader import seed_calculator

app = typer.Typer(help="Exchange rates")
console = Console()


def _print_rates(calc: ReturnCalculator, title: str) -> None:
    table = Table(title=title)
    table.add_column("Currency", style="bold")
    table.add_column(f"{calc.base_currency.value} per unit", justify="right")
    for code, rate in calc.rates.items():
        table.add_row(code.value, f"{rate:,.4f}")
    console.print(table)


@app.command("show")
def show():
    """Show the configured seed rates."""
    _print_rates(seed_calculator(console), "Seed Rates (config.json)")


@app.command("fetch")
def fetch():
    """Fetch live rates from exchangerate-api.com."""
    calc = seed_calculator(console)
    if refresh_rates(calc):
        _print_rates(calc, "Live Rates")
    else:
        console.print("[yellow]Fetch failed, showing last-known rates[/yellow]")
        _print_rates(calc, "Seed Rates (config.json)")
        raise typer.Exit(1)
