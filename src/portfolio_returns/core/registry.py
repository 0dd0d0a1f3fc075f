"""
Asset registry: known asset id → display name and Yahoo Finance ticker.

Transactions may only reference assets listed here (or CASH). Extra assets
can be added without code changes in user_registry.json next to config.json:

    {"TENCENT": {"name": "腾讯控股", "ticker": "0700.HK"}}
"""

import json
import logging
from pathlib import Path

from .config import config_dir
from .exceptions import UnknownAssetError
from .models import CASH_ASSET

logger = logging.getLogger(__name__)

ASSET_REGISTRY: dict[str, dict] = {
    "MOUTAI": {
        "name": "贵州茅台",
        "ticker": "600519.SS",
    },
    "XIAOMI": {
        "name": "小米",
        "ticker": "1810.HK",
    },
}


def _user_registry_path() -> Path:
    return config_dir() / "user_registry.json"


def load_user_registry() -> dict[str, dict]:
    path = _user_registry_path()
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return {}


def save_user_registry(registry: dict[str, dict]) -> None:
    path = _user_registry_path()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(registry, f, indent=2, ensure_ascii=False)
        f.write("\n")


def all_assets() -> dict[str, dict]:
    merged = dict(ASSET_REGISTRY)
    merged.update(load_user_registry())
    return merged


def resolve_asset(asset: str, known: dict[str, dict] | None = None) -> str:
    """Map an asset id or display name onto its registered id.

    Raises UnknownAssetError for anything that is not registered.
    """
    if asset == CASH_ASSET:
        return asset
    known = all_assets() if known is None else known
    if asset in known:
        return asset
    for asset_id, info in known.items():
        if info.get("name") == asset:
            return asset_id
    raise UnknownAssetError(f"Unknown asset {asset!r}. Add it to user_registry.json")


def ticker_for(asset: str, known: dict[str, dict] | None = None) -> str:
    known = all_assets() if known is None else known
    return known.get(asset, {}).get("ticker") or asset
