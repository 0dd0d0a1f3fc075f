"""Shared helpers for building a ReturnCalculator from CLI options."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ...core.calculator import ReturnCalculator
from ...core.exceptions import PortfolioReturnsError
from ...core.models import SellPolicy
from ...external.refresh import refresh_prices, refresh_rates
from ...importers.csv_ledger import CsvLedgerImporter
from ...importers.demo import demo_ledger

LEDGER_ARG = typer.Argument(None, help="Ledger CSV (id,date,type,asset,shares,price,currency). Demo ledger if omitted.")
SELL_POLICY_OPT = typer.Option(None, "--sell-policy", help="ignore | decrement (default from config.json)")
FETCH_OPT = typer.Option(False, "--fetch/--no-fetch", help="Refresh rates and prices before calculating")


def load_calculator(
    console: Console,
    ledger_path: Optional[Path],
    sell_policy: Optional[SellPolicy] = None,
    fetch: bool = False,
) -> ReturnCalculator:
    """Build a calculator from a CSV (or the demo ledger); exit 1 on bad input."""
    try:
        calc = ReturnCalculator(sell_policy=sell_policy)
        if ledger_path is None:
            console.print("[dim]No ledger given, using the demo ledger[/dim]")
            calc.set_ledger(demo_ledger())
        else:
            result = CsvLedgerImporter(assets=calc.assets).run(ledger_path)
            for w in result.warnings:
                console.print(f"[yellow]• {w}[/yellow]")
            calc.set_ledger(result.transactions)
    except FileNotFoundError:
        console.print(f"[red]Ledger file not found: {ledger_path}[/red]")
        raise typer.Exit(1)
    except PortfolioReturnsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if fetch:
        if not refresh_rates(calc):
            console.print("[yellow]Rate refresh failed, using last-known rates[/yellow]")
        failed = refresh_prices(calc)
        if failed:
            console.print(f"[yellow]Price refresh failed for: {', '.join(failed)}[/yellow]")
    return calc


def seed_calculator(console: Console) -> ReturnCalculator:
    """Calculator with the configured seed tables and no ledger; exit 1 on a bad config.json."""
    try:
        return ReturnCalculator()
    except PortfolioReturnsError as e:
        console.print(f"[red]Invalid config.json: {e}[/red]")
        raise typer.Exit(1)
