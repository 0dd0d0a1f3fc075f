"""Current market valuation of derived holdings, in base currency."""

import logging
from decimal import Decimal
from typing import Mapping, Sequence

from ..models import CASH_ASSET, Currency, Holding, SellPolicy, Transaction, Valuation
from .currency import BASE_CURRENCY, RateTable, to_base
from .holdings import net_cash_flow, sale_proceeds

logger = logging.getLogger(__name__)

PriceTable = Mapping[str, Decimal]


def asset_currency(asset: str, ledger: Sequence[Transaction]) -> Currency:
    """Currency of the FIRST ledger row that mentions `asset`.

    First-match is order dependent: if an asset was traded in more than one
    currency, later rows are ignored for valuation. Falls back to the base
    currency when no row matches.
    """
    for t in ledger:
        if t.asset == asset:
            return t.currency
    return BASE_CURRENCY


def currency_conflicts(ledger: Sequence[Transaction]) -> dict[str, set[Currency]]:
    """Assets that appear with more than one currency in the ledger."""
    seen: dict[str, set[Currency]] = {}
    for t in ledger:
        if not t.is_cash:
            seen.setdefault(t.asset, set()).add(t.currency)
    return {asset: codes for asset, codes in seen.items() if len(codes) > 1}


def holdings_value(
    holdings: Mapping[str, Holding],
    prices: PriceTable,
    ledger: Sequence[Transaction],
    rates: RateTable,
    missing: list[str] | None = None,
) -> Decimal:
    """Market value of all non-cash holdings.

    Assets without a price are valued at 0. Their ids are appended to
    `missing` (when given) and logged.
    """
    total = Decimal("0")
    for asset, h in holdings.items():
        if asset == CASH_ASSET:
            continue
        price = prices.get(asset)
        if price is None:
            logger.warning("No price for %s; valuing %s shares at 0", asset, h.shares)
            if missing is not None:
                missing.append(asset)
            price = Decimal("0")
        total += to_base(h.shares * price, asset_currency(asset, ledger), rates)
    return total


def value_portfolio(
    holdings: Mapping[str, Holding],
    prices: PriceTable,
    ledger: Sequence[Transaction],
    rates: RateTable,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> Valuation:
    """Full valuation breakdown.

    Net cash flow (SUBSCRIBE − REDEEM) is counted as still present in the
    portfolio regardless of date; there is no running cash balance. Under
    SellPolicy.DECREMENT the proceeds of sales are held as cash as well.
    """
    for asset, codes in currency_conflicts(ledger).items():
        logger.warning(
            "%s traded in %s; valuing in %s (first transaction)",
            asset,
            ", ".join(sorted(c.value for c in codes)),
            asset_currency(asset, ledger).value,
        )
    valuation = Valuation()
    valuation.holdings_value = holdings_value(
        holdings, prices, ledger, rates, missing=valuation.missing_prices
    )
    valuation.net_cash_flow = net_cash_flow(ledger, rates)
    if sell_policy == SellPolicy.DECREMENT:
        valuation.sale_proceeds = sale_proceeds(ledger, rates)
    return valuation


def current_value(
    holdings: Mapping[str, Holding],
    prices: PriceTable,
    ledger: Sequence[Transaction],
    rates: RateTable,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> Decimal:
    """Total current portfolio value in base currency."""
    return value_portfolio(holdings, prices, ledger, rates, sell_policy).total
