"""Return commands."""

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.exceptions import PortfolioReturnsError
from ...core.models import SellPolicy
from .loader import FETCH_OPT, LEDGER_ARG, SELL_POLICY_OPT, load_calculator

app = typer.Typer(help="Portfolio returns")
console = Console()


def _parse_as_of(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        console.print("[red]Invalid date format. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def _pct(value) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]{value:+.2f}%[/{color}]"


@app.command("show")
def show(
    ledger_path: Optional[Path] = LEDGER_ARG,
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Valuation date YYYY-MM-DD (default: today)"),
    sell_policy: Optional[SellPolicy] = SELL_POLICY_OPT,
    fetch: bool = FETCH_OPT,
):
    """Show fund-NAV style return (TWR) and day-weighted return (MWR)."""
    as_of_date = _parse_as_of(as_of)
    calc = load_calculator(console, ledger_path, sell_policy, fetch)
    try:
        r = calc.get_returns(as_of=as_of_date)
    except PortfolioReturnsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Returns as of {r.as_of.isoformat()}[/bold]  [dim](sell policy: {calc.sell_policy.value})[/dim]\n")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Total Investment", f"¥{r.total_investment:,.2f}")
    table.add_row("Current Value", f"¥{r.current_value:,.2f}")
    table.add_row("[bold]TWR (NAV method)[/bold]", _pct(r.twr))
    table.add_section()
    table.add_row("Net Cash Flow", f"¥{r.total_cash_flow:,.2f}")
    table.add_row("Weighted Exposure", f"¥{r.weighted_exposure:,.2f}·yr")
    table.add_row("[bold]MWR (day-weighted)[/bold]", _pct(r.mwr))
    console.print(table)

    if r.warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in r.warnings:
            console.print(f"  • {w}")
    console.print()
