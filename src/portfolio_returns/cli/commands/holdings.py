"""Holdings commands."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.exceptions import PortfolioReturnsError
from ...core.finance import asset_currency, to_base
from ...core.models import CASH_ASSET, SellPolicy
from .loader import FETCH_OPT, LEDGER_ARG, SELL_POLICY_OPT, load_calculator

app = typer.Typer(help="Derived holdings")
console = Console()


@app.command("list")
def list_holdings(
    ledger_path: Optional[Path] = LEDGER_ARG,
    sell_policy: Optional[SellPolicy] = SELL_POLICY_OPT,
    fetch: bool = FETCH_OPT,
):
    """List per-asset shares, cost basis and current value (CNY)."""
    calc = load_calculator(console, ledger_path, sell_policy, fetch)
    snap = calc.snapshot
    try:
        holdings = calc.holdings()
        valuation = calc.valuation()
    except PortfolioReturnsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not holdings:
        console.print("[yellow]No holdings. The ledger has no buys.[/yellow]")

    table = Table(title="Holdings")
    table.add_column("Asset", style="bold")
    table.add_column("Name")
    table.add_column("Ccy")
    table.add_column("Shares", justify="right")
    table.add_column("Cost (¥)", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Value (¥)", justify="right")
    table.add_column("P&L (¥)", justify="right")

    for asset, h in holdings.items():
        name = calc.assets.get(asset, {}).get("name", "—")
        if asset == CASH_ASSET:
            table.add_row(asset, name, "—", f"{h.shares:,.4f}", f"{h.cost_basis:,.2f}", "—", "—", "—")
            continue
        ccy = asset_currency(asset, snap.ledger)
        price = snap.prices.get(asset)
        value = to_base(h.shares * (price or Decimal("0")), ccy, snap.rates)
        pnl = value - h.cost_basis
        color = "green" if pnl >= 0 else "red"
        table.add_row(
            asset,
            name,
            ccy.value,
            f"{h.shares:,.4f}",
            f"{h.cost_basis:,.2f}",
            f"{price:,.4f}" if price is not None else "[red]missing[/red]",
            f"{value:,.2f}",
            f"[{color}]{pnl:,.2f}[/{color}]",
        )

    table.add_section()
    table.add_row("[bold]Holdings[/bold]", "", "", "", "", "", f"[bold]{valuation.holdings_value:,.2f}[/bold]", "")
    table.add_row("Net cash flow", "", "", "", "", "", f"{valuation.net_cash_flow:,.2f}", "")
    if valuation.sale_proceeds:
        table.add_row("Sale proceeds", "", "", "", "", "", f"{valuation.sale_proceeds:,.2f}", "")
    table.add_row("[bold]TOTAL[/bold]", "", "", "", "", "", f"[bold]{valuation.total:,.2f}[/bold]", "")
    console.print(table)
