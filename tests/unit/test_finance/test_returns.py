"""Tests for core.finance.returns.

Dates are chosen so that day weights are whole years: 2024-01-01 to
2024-12-31 is exactly 365 days.
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_returns.core.exceptions import MissingRateError
from portfolio_returns.core.finance.returns import (
    calculate_mwr,
    calculate_twr,
    compute_returns,
    mwr_percent,
    twr_percent,
    weighted_cash_flows,
)
from portfolio_returns.core.models import Currency, SellPolicy, Transaction

AS_OF = date(2024, 12, 31)


def _tx(id, tx_type, asset, shares, price, currency="CNY", day=date(2024, 1, 1)):
    return Transaction(
        id=id,
        transaction_date=day,
        transaction_type=tx_type,
        asset=asset,
        shares=Decimal(str(shares)),
        price=Decimal(str(price)),
        currency=currency,
    )


def _prices(**kw):
    return {k: Decimal(str(v)) for k, v in kw.items()}


class TestGuards:
    def test_twr_zero_investment(self):
        assert twr_percent(Decimal("0"), Decimal("500")) == Decimal("0")

    def test_mwr_non_positive_weight(self):
        assert mwr_percent(Decimal("500"), Decimal("100"), Decimal("0")) == Decimal("0")
        assert mwr_percent(Decimal("500"), Decimal("100"), Decimal("-3")) == Decimal("0")

    def test_empty_ledger(self, rates):
        assert calculate_twr([], rates, {}) == Decimal("0")
        assert calculate_mwr([], rates, {}, as_of=AS_OF) == Decimal("0")


class TestTWR:
    def test_unchanged_price(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100)]
        assert calculate_twr(ledger, rates, _prices(MOUTAI=100)) == Decimal("0.00")

    def test_price_doubles(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100)]
        assert calculate_twr(ledger, rates, _prices(MOUTAI=200)) == Decimal("100.00")

    def test_fifty_percent(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100)]
        assert calculate_twr(ledger, rates, _prices(MOUTAI=150)) == Decimal("50.00")

    def test_subscribe_only_is_flat(self, rates):
        ledger = [_tx(1, "subscribe", "CASH", 0, 1000)]
        assert calculate_twr(ledger, rates, {}) == Decimal("0.00")

    def test_loss(self, rates):
        ledger = [_tx(1, "buy", "XIAOMI", 1000, 20, "HKD")]
        assert calculate_twr(ledger, rates, _prices(XIAOMI=15)) == Decimal("-25.00")

    def test_missing_price_counts_as_total_loss(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100)]
        assert calculate_twr(ledger, rates, {}) == Decimal("-100.00")

    def test_missing_rate_raises(self):
        ledger = [_tx(1, "buy", "XIAOMI", 10, 100, "USD")]
        with pytest.raises(MissingRateError):
            calculate_twr(ledger, {Currency.CNY: Decimal("1")}, _prices(XIAOMI=1))


class TestMWR:
    def test_one_year_hold(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100)]
        assert calculate_mwr(ledger, rates, _prices(MOUTAI=150), as_of=AS_OF) == Decimal("50.00")

    def test_dated_today_is_zero(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100, day=AS_OF)]
        assert calculate_mwr(ledger, rates, _prices(MOUTAI=150), as_of=AS_OF) == Decimal("0")

    def test_defaults_to_today(self, rates):
        ledger = [_tx(1, "buy", "MOUTAI", 10, 100, day=date.today())]
        assert calculate_mwr(ledger, rates, _prices(MOUTAI=150)) == Decimal("0")

    def test_redeem_reduces_flow_and_weight(self, rates):
        ledger = [
            _tx(1, "subscribe", "CASH", 0, 1000),
            _tx(2, "redeem", "CASH", 0, 500, day=date(2024, 7, 1)),  # 183 days
        ]
        flow, weighted = weighted_cash_flows(ledger, rates, AS_OF)
        assert flow == Decimal("500")
        assert weighted == Decimal("1000") - Decimal("500") * (Decimal("183") / Decimal("365"))
        # Cash is not part of the MWR value: (0 − 500) / 749.3151 → −66.73%
        assert calculate_mwr(ledger, rates, {}, as_of=AS_OF) == Decimal("-66.73")

    def test_redeem_only_is_zero(self, rates):
        ledger = [_tx(1, "redeem", "CASH", 0, 100)]
        assert calculate_mwr(ledger, rates, {}, as_of=AS_OF) == Decimal("0")

    def test_zero_share_row_uses_price(self, rates):
        # shares × price is 0, so the amount falls back to price alone
        ledger = [_tx(1, "buy", "MOUTAI", 0, 500)]
        flow, weighted = weighted_cash_flows(ledger, rates, AS_OF)
        assert flow == Decimal("500")
        assert calculate_mwr(ledger, rates, _prices(MOUTAI=600), as_of=AS_OF) == Decimal("-100.00")
        assert calculate_twr(ledger, rates, _prices(MOUTAI=600)) == Decimal("0")

    def test_date_sort_independent_of_ledger_order(self, rates):
        ledger = [
            _tx(2, "buy", "MOUTAI", 5, 120, day=date(2024, 7, 1)),
            _tx(1, "buy", "MOUTAI", 10, 100),
        ]
        forward = calculate_mwr(ledger, rates, _prices(MOUTAI=130), as_of=AS_OF)
        backward = calculate_mwr(list(reversed(ledger)), rates, _prices(MOUTAI=130), as_of=AS_OF)
        assert forward == backward


class TestSellPolicy:
    """Buy 10 @ 100 on 2024-01-01, sell 5 @ 200 on the valuation date, price now 120."""

    def _ledger(self):
        return [
            _tx(1, "buy", "MOUTAI", 10, 100),
            _tx(2, "sell", "MOUTAI", 5, 200, day=AS_OF),
        ]

    def test_ignore(self, rates):
        prices = _prices(MOUTAI=120)
        # Sale invisible: 10 × 120 = 1200 against 1000 invested
        assert calculate_twr(self._ledger(), rates, prices, SellPolicy.IGNORE) == Decimal("20.00")
        assert calculate_mwr(self._ledger(), rates, prices, AS_OF, SellPolicy.IGNORE) == Decimal("20.00")

    def test_decrement(self, rates):
        prices = _prices(MOUTAI=120)
        # 5 × 120 = 600 held + 1000 proceeds = 1600 against 1000 invested
        assert calculate_twr(self._ledger(), rates, prices, SellPolicy.DECREMENT) == Decimal("60.00")
        # MWR: value 600, net flow 1000 − 1000 = 0, weight 1000
        assert calculate_mwr(self._ledger(), rates, prices, AS_OF, SellPolicy.DECREMENT) == Decimal("60.00")

    def test_decrement_earlier_sale_weighted(self, rates):
        ledger = [
            _tx(1, "buy", "MOUTAI", 10, 100),
            _tx(2, "sell", "MOUTAI", 10, 150, day=date(2024, 6, 1)),  # 213 days
        ]
        # weight = 1000 − 1500 × 213/365, gain = 0 − (1000 − 1500)
        assert calculate_mwr(ledger, rates, {}, AS_OF, SellPolicy.DECREMENT) == Decimal("401.10")


class TestComputeReturns:
    def _ledger(self):
        return [
            _tx(1, "buy", "MOUTAI", 10, 1650, day=date(2024, 1, 15)),
            _tx(2, "buy", "XIAOMI", 1000, "18.5", "HKD", day=date(2024, 3, 20)),
            _tx(3, "subscribe", "CASH", 0, 50000, day=date(2024, 6, 10)),
        ]

    def test_multi_currency(self, rates):
        r = compute_returns(self._ledger(), rates, _prices(MOUTAI=1580, XIAOMI="22.5"), as_of=AS_OF)
        # invested 16500 + 16835 + 50000; value 15800 + 20475 + 50000
        assert r.total_investment == Decimal("83335")
        assert r.current_value == Decimal("86275")
        assert r.twr == Decimal("3.53")
        assert r.total_cash_flow == Decimal("83335")
        assert r.mwr == Decimal("-82.56")
        assert r.as_of == AS_OF
        assert r.warnings == []

    def test_matches_single_functions(self, rates):
        prices = _prices(MOUTAI=1700, XIAOMI=25)
        r = compute_returns(self._ledger(), rates, prices, as_of=AS_OF)
        assert r.twr == calculate_twr(self._ledger(), rates, prices)
        assert r.mwr == calculate_mwr(self._ledger(), rates, prices, as_of=AS_OF)

    def test_missing_price_warning(self, rates):
        r = compute_returns(self._ledger(), rates, _prices(MOUTAI=1580), as_of=AS_OF)
        assert r.warnings == ["No price for XIAOMI; valued at 0"]

    def test_two_decimals(self, rates):
        r = compute_returns(self._ledger(), rates, _prices(MOUTAI=1601, XIAOMI=23), as_of=AS_OF)
        assert r.twr.as_tuple().exponent == -2
        assert r.mwr.as_tuple().exponent == -2
        assert r.to_dict() == {"twr": float(r.twr), "mwr": float(r.mwr)}
