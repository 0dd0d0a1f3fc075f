"""Tests for core.models: coercion and validation at ingestion."""

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from portfolio_returns.core.exceptions import InvalidTransactionError, UnsupportedCurrencyError
from portfolio_returns.core.models import (
    CASH_ASSET,
    Currency,
    Holding,
    Transaction,
    TransactionType,
    Valuation,
)


class TestTransactionType:
    @pytest.mark.parametrize("label,expected", [
        ("buy", TransactionType.BUY),
        ("SELL", TransactionType.SELL),
        (" Subscribe ", TransactionType.SUBSCRIBE),
        ("买入", TransactionType.BUY),
        ("卖出", TransactionType.SELL),
        ("申购", TransactionType.SUBSCRIBE),
        ("赎回", TransactionType.REDEEM),
    ])
    def test_parse(self, label, expected):
        assert TransactionType.parse(label) == expected

    def test_unknown(self):
        with pytest.raises(InvalidTransactionError):
            TransactionType.parse("dividend")

    def test_cash_flow_flag(self):
        assert TransactionType.SUBSCRIBE.is_cash_flow
        assert TransactionType.REDEEM.is_cash_flow
        assert not TransactionType.BUY.is_cash_flow


class TestCurrency:
    def test_parse_lowercase(self):
        assert Currency.parse("hkd") == Currency.HKD

    def test_unknown(self):
        with pytest.raises(UnsupportedCurrencyError):
            Currency.parse("EUR")


class TestTransaction:
    def test_coerces_strings(self):
        t = Transaction(
            id=1, transaction_date="2024-01-15", transaction_type="买入",
            asset="MOUTAI", shares="10", price="1650", currency="cny",
        )
        assert t.transaction_date == date(2024, 1, 15)
        assert t.transaction_type == TransactionType.BUY
        assert t.shares == Decimal("10")
        assert t.currency == Currency.CNY

    @pytest.mark.parametrize("alias", ["Cash", "cash", "现金", "CASH"])
    def test_cash_aliases(self, alias):
        t = Transaction(1, date(2024, 1, 1), "subscribe", alias, 0, 1000)
        assert t.asset == CASH_ASSET
        assert t.is_cash

    def test_negative_shares_rejected(self):
        with pytest.raises(InvalidTransactionError):
            Transaction(1, date(2024, 1, 1), "buy", "MOUTAI", -1, 100)

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidTransactionError):
            Transaction(1, date(2024, 1, 1), "buy", "MOUTAI", 1, "-100")

    def test_bad_number(self):
        with pytest.raises(InvalidTransactionError):
            Transaction(1, date(2024, 1, 1), "buy", "MOUTAI", "ten", 100)

    @pytest.mark.parametrize("shares,price", [
        ("nan", 100),
        ("Infinity", 100),
        (1, "-inf"),
        (Decimal("NaN"), 100),
        (1, Decimal("Infinity")),
    ])
    def test_non_finite_rejected(self, shares, price):
        with pytest.raises(InvalidTransactionError, match="finite"):
            Transaction(1, date(2024, 1, 1), "buy", "MOUTAI", shares, price)

    def test_bad_date(self):
        with pytest.raises(InvalidTransactionError):
            Transaction(1, "15/01/2024", "buy", "MOUTAI", 1, 100)

    def test_empty_asset(self):
        with pytest.raises(InvalidTransactionError):
            Transaction(1, date(2024, 1, 1), "buy", "  ", 1, 100)

    def test_immutable(self):
        t = Transaction(1, date(2024, 1, 1), "buy", "MOUTAI", 1, 100)
        with pytest.raises(dataclasses.FrozenInstanceError):
            t.shares = Decimal("2")

    def test_total_value(self):
        assert Transaction(1, date(2024, 1, 1), "buy", "MOUTAI", 10, 100).total_value == Decimal("1000")
        # cash rows carry the amount in price
        assert Transaction(2, date(2024, 1, 1), "subscribe", "CASH", 0, 500).total_value == Decimal("500")


class TestDerived:
    def test_average_cost(self):
        assert Holding("MOUTAI", Decimal("4"), Decimal("600")).average_cost == Decimal("150")
        assert Holding("MOUTAI").average_cost == Decimal("0")

    def test_valuation_total(self):
        v = Valuation(Decimal("100"), Decimal("50"), Decimal("25"))
        assert v.total == Decimal("175")
