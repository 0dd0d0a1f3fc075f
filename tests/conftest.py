"""Shared pytest fixtures for portfolio returns tests."""

from decimal import Decimal

import pytest

from portfolio_returns.core.config import set_config_path
from portfolio_returns.core.models import Currency


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """Each test reads config.json / user_registry.json from its own temp dir."""
    path = tmp_path / "config.json"
    set_config_path(path)
    yield path
    set_config_path(None)


@pytest.fixture
def rates():
    return {
        Currency.CNY: Decimal("1"),
        Currency.HKD: Decimal("0.91"),
        Currency.USD: Decimal("7.25"),
    }
