"""Application configuration, loaded from config.json at the project root."""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .models import SellPolicy

logger = logging.getLogger(__name__)

# Seed tables used until the first successful fetch
DEFAULT_RATES: dict[str, Decimal] = {
    "CNY": Decimal("1"),
    "HKD": Decimal("0.91"),
    "USD": Decimal("7.25"),
}

DEFAULT_PRICES: dict[str, Decimal] = {
    "MOUTAI": Decimal("1580"),
    "XIAOMI": Decimal("22.5"),
}


@dataclass
class AppConfig:
    base_currency: str = "CNY"
    sell_policy: SellPolicy = SellPolicy.IGNORE
    rates_api_url: str = "https://api.exchangerate-api.com/v4/latest"
    request_timeout: float = 10.0
    fetch_retries: int = 1
    default_rates: dict[str, Decimal] = field(default_factory=lambda: dict(DEFAULT_RATES))
    default_prices: dict[str, Decimal] = field(default_factory=lambda: dict(DEFAULT_PRICES))
    log_level: str = "WARNING"


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None
_path_override: Optional[Path] = None


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where pyproject.toml lives)."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback: current working directory
    return Path.cwd()


def config_dir() -> Path:
    if _path_override is not None:
        return _path_override.parent
    return _find_project_root()


def _config_path() -> Path:
    if _path_override is not None:
        return _path_override
    return _find_project_root() / "config.json"


def set_config_path(path) -> None:
    """Point the loader at another config.json and drop the cached config."""
    global _path_override, _cached
    _path_override = Path(path) if path is not None else None
    _cached = None


def _decimal_table(raw: dict) -> dict[str, Decimal]:
    return {str(k): Decimal(str(v)) for k, v in raw.items()}


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        _cached = AppConfig(
            base_currency=data.get("base_currency", _DEFAULTS.base_currency),
            sell_policy=SellPolicy(data.get("sell_policy", _DEFAULTS.sell_policy.value)),
            rates_api_url=data.get("rates_api_url", _DEFAULTS.rates_api_url),
            request_timeout=float(data.get("request_timeout", _DEFAULTS.request_timeout)),
            fetch_retries=int(data.get("fetch_retries", _DEFAULTS.fetch_retries)),
            default_rates=_decimal_table(data.get("default_rates", DEFAULT_RATES)),
            default_prices=_decimal_table(data.get("default_prices", DEFAULT_PRICES)),
            log_level=data.get("log_level", _DEFAULTS.log_level),
        )
    except (OSError, ValueError, TypeError, ArithmeticError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    data = {
        "base_currency": cfg.base_currency,
        "sell_policy": cfg.sell_policy.value,
        "rates_api_url": cfg.rates_api_url,
        "request_timeout": cfg.request_timeout,
        "fetch_retries": cfg.fetch_retries,
        "default_rates": {k: str(v) for k, v in cfg.default_rates.items()},
        "default_prices": {k: str(v) for k, v in cfg.default_prices.items()},
        "log_level": cfg.log_level,
    }
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
