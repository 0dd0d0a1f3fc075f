"""Settings commands: write config.json and user_registry.json."""

import dataclasses

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ...core.config import get_config, save_config
from ...core.models import CASH_ASSET, SellPolicy
from ...core.registry import ASSET_REGISTRY, all_assets, load_user_registry, save_user_registry

app = typer.Typer(help="Settings and asset registry")
console = Console()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@app.command("show")
def show():
    """Show the current settings and registered assets."""
    cfg = get_config()
    table = Table(box=box.ROUNDED, border_style="cyan", show_header=False, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column(style="bold")
    table.add_row("Base currency", cfg.base_currency)
    table.add_row("Sell policy", cfg.sell_policy.value)
    table.add_row("Rates API", cfg.rates_api_url)
    table.add_row("Timeout / retries", f"{cfg.request_timeout:g}s / {cfg.fetch_retries}")
    table.add_row("Log level", cfg.log_level)
    console.print(table)

    assets = Table(title="Assets")
    assets.add_column("ID", style="bold")
    assets.add_column("Name")
    assets.add_column("Ticker")
    assets.add_column("Source", style="dim")
    for asset_id, info in all_assets().items():
        source = "built-in" if asset_id in ASSET_REGISTRY else "user"
        assets.add_row(asset_id, info.get("name", ""), info.get("ticker", ""), source)
    console.print(assets)


@app.command("set")
def set_option(
    sell_policy: SellPolicy = typer.Option(None, "--sell-policy", help="ignore | decrement"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING | ERROR"),
    timeout: float = typer.Option(None, "--timeout", help="Fetch timeout in seconds"),
    retries: int = typer.Option(None, "--retries", help="Extra attempts per rate fetch"),
):
    """Update config.json. Options not given keep their current value."""
    changes = {}
    if sell_policy is not None:
        changes["sell_policy"] = sell_policy
    if log_level is not None:
        level = log_level.upper()
        if level not in LOG_LEVELS:
            console.print(f"[red]Unknown log level {log_level!r}[/red]")
            raise typer.Exit(1)
        changes["log_level"] = level
    if timeout is not None:
        if timeout <= 0:
            console.print("[red]Timeout must be positive[/red]")
            raise typer.Exit(1)
        changes["request_timeout"] = timeout
    if retries is not None:
        if retries < 0:
            console.print("[red]Retries must be zero or more[/red]")
            raise typer.Exit(1)
        changes["fetch_retries"] = retries
    if not changes:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    save_config(dataclasses.replace(get_config(), **changes))
    for key, value in changes.items():
        console.print(f"[green]{key}[/green] = {getattr(value, 'value', value)}")


@app.command("add-asset")
def add_asset(
    asset_id: str = typer.Argument(..., help="Asset id used in ledgers, e.g. TENCENT"),
    name: str = typer.Argument(..., help="Display name, e.g. 腾讯控股"),
    ticker: str = typer.Argument(..., help="Yahoo Finance symbol, e.g. 0700.HK"),
):
    """Register an extra asset in user_registry.json."""
    asset_id = asset_id.strip().upper()
    if asset_id == CASH_ASSET or asset_id in ASSET_REGISTRY:
        console.print(f"[red]{asset_id} is built in and cannot be redefined[/red]")
        raise typer.Exit(1)
    registry = load_user_registry()
    registry[asset_id] = {"name": name.strip(), "ticker": ticker.strip()}
    save_user_registry(registry)
    console.print(f"[green]Registered {asset_id}[/green] ({name} → {ticker})")


@app.command("remove-asset")
def remove_asset(asset_id: str = typer.Argument(..., help="Asset id")):
    """Remove an asset from user_registry.json."""
    registry = load_user_registry()
    if asset_id not in registry:
        console.print(f"[red]{asset_id} is not in user_registry.json[/red]")
        raise typer.Exit(1)
    del registry[asset_id]
    save_user_registry(registry)
    console.print(f"[green]Removed {asset_id}[/green]")
