"""Ledger file commands."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...core.exceptions import PortfolioReturnsError
from ...importers.csv_ledger import CsvLedgerImporter

app = typer.Typer(help="Ledger files")
console = Console()


@app.command("check")
def check(
    path: Path = typer.Argument(..., help="Ledger CSV"),
    strict: bool = typer.Option(False, "--strict", help="Fail on the first bad row"),
):
    """Validate a ledger CSV and list its transactions."""
    try:
        result = CsvLedgerImporter(strict=strict).run(path)
    except FileNotFoundError:
        console.print(f"[red]Ledger file not found: {path}[/red]")
        raise typer.Exit(1)
    except PortfolioReturnsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Ledger: {path.name}")
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Asset", style="bold")
    table.add_column("Shares", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Ccy")
    for t in result.transactions:
        table.add_row(
            str(t.id),
            t.transaction_date.isoformat(),
            t.transaction_type.value,
            t.asset,
            f"{t.shares:,.4f}",
            f"{t.price:,.4f}",
            t.currency.value,
        )
    console.print(table)

    summary = Table(show_header=False, box=None)
    summary.add_column("Label")
    summary.add_column("Value", justify="right")
    summary.add_row("Rows imported", str(result.rows_imported))
    summary.add_row("Rows skipped", str(result.rows_skipped))
    console.print(Panel(summary, title=result.source, border_style="green" if not result.warnings else "yellow"))

    if result.warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for w in result.warnings:
            console.print(f"  • {w}")
        raise typer.Exit(1)
