"""Tests for core.config."""

import json
from decimal import Decimal

from portfolio_returns.core.config import AppConfig, get_config, save_config, set_config_path
from portfolio_returns.core.models import SellPolicy


def test_defaults_without_file():
    cfg = get_config()
    assert cfg.base_currency == "CNY"
    assert cfg.sell_policy == SellPolicy.IGNORE
    assert cfg.default_rates["HKD"] == Decimal("0.91")
    assert cfg.default_prices["MOUTAI"] == Decimal("1580")


def test_cached():
    assert get_config() is get_config()


def test_load_from_file(isolated_config):
    isolated_config.write_text(json.dumps({
        "sell_policy": "decrement",
        "request_timeout": 3,
        "default_rates": {"CNY": 1, "HKD": "0.92", "USD": "7.1"},
    }), encoding="utf-8")
    set_config_path(isolated_config)
    cfg = get_config()
    assert cfg.sell_policy == SellPolicy.DECREMENT
    assert cfg.request_timeout == 3.0
    assert cfg.default_rates["USD"] == Decimal("7.1")
    # untouched keys keep defaults
    assert cfg.default_prices["XIAOMI"] == Decimal("22.5")


def test_bad_file_falls_back(isolated_config):
    isolated_config.write_text('{"sell_policy": "sometimes"}', encoding="utf-8")
    set_config_path(isolated_config)
    assert get_config().sell_policy == SellPolicy.IGNORE


def test_save_round_trip(isolated_config):
    save_config(AppConfig(sell_policy=SellPolicy.DECREMENT, fetch_retries=3))
    set_config_path(isolated_config)  # drop cache
    cfg = get_config()
    assert cfg.sell_policy == SellPolicy.DECREMENT
    assert cfg.fetch_retries == 3
