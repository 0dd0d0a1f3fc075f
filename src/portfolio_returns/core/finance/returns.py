"""Portfolio return calculations.

All functions are pure: they accept a ledger plus rate and price snapshots
and return Decimal values. No I/O, no side effects, no cached state.

Both figures are cheap approximations, not textbook definitions:

* "TWR" is a fund-NAV style cumulative return, (value − invested) / invested.
  There is no sub-period chaining.
* "MWR" divides the gain by linearly day-weighted cash flows
  (amount × days/365). There is no iterative IRR root solve.
"""

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..models import PortfolioReturns, SellPolicy, Transaction, TransactionType
from .currency import RateTable, to_base
from .holdings import aggregate, total_investment
from .valuation import holdings_value, value_portfolio

PERCENT = Decimal("0.01")
DAYS_PER_YEAR = Decimal("365")


def twr_percent(invested: Decimal, value: Decimal) -> Decimal:
    """(value − invested) / invested × 100, or 0 when nothing was invested."""
    if invested <= 0:
        return Decimal("0")
    return (value - invested) / invested * 100


def weighted_cash_flows(
    ledger: Sequence[Transaction],
    rates: RateTable,
    as_of: date,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> tuple[Decimal, Decimal]:
    """Net external cash flow and its day-weighted exposure.

    Transactions are visited by date. Each row's amount is its base-currency
    shares × price, or its price alone when that product is zero (cash rows).
    BUY and SUBSCRIBE count as money in, REDEEM as money out. SELL counts as
    money out only under SellPolicy.DECREMENT.

    Returns:
        (total_cash_flow, weighted) where weighted = Σ ±amount × days_held/365.
    """
    total = Decimal("0")
    weighted = Decimal("0")
    for t in sorted(ledger, key=lambda t: t.transaction_date):
        if t.transaction_type in (TransactionType.BUY, TransactionType.SUBSCRIBE):
            sign = 1
        elif t.transaction_type == TransactionType.REDEEM:
            sign = -1
        elif sell_policy == SellPolicy.DECREMENT:
            sign = -1
        else:
            continue
        amount = to_base(t.total_value, t.currency, rates)
        years = Decimal((as_of - t.transaction_date).days) / DAYS_PER_YEAR
        total += sign * amount
        weighted += sign * amount * years
    return total, weighted


def mwr_percent(value: Decimal, total_cash_flow: Decimal, weighted: Decimal) -> Decimal:
    """(value − net cash flow) / weighted exposure × 100, or 0 for weighted ≤ 0."""
    if weighted <= 0:
        return Decimal("0")
    return (value - total_cash_flow) / weighted * 100


def calculate_twr(
    ledger: Sequence[Transaction],
    rates: RateTable,
    prices: Mapping[str, Decimal],
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> Decimal:
    """Fund-NAV style return in percent, quantized to 0.01.

    Example:
        BUY 10 @ 100 CNY with a current price of 150 → Decimal("50.00").
    """
    holdings = aggregate(ledger, rates, sell_policy)
    value = value_portfolio(holdings, prices, ledger, rates, sell_policy).total
    return twr_percent(total_investment(ledger, rates), value).quantize(PERCENT)


def calculate_mwr(
    ledger: Sequence[Transaction],
    rates: RateTable,
    prices: Mapping[str, Decimal],
    as_of: Optional[date] = None,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> Decimal:
    """Simplified money-weighted return in percent, quantized to 0.01.

    The current value is holdings × prices only; SUBSCRIBE/REDEEM cash is
    not part of it. Returns Decimal("0.00") when the weighted exposure is
    not positive, e.g. an empty ledger or everything dated `as_of`.
    """
    as_of = as_of or date.today()
    holdings = aggregate(ledger, rates, sell_policy)
    value = holdings_value(holdings, prices, ledger, rates)
    flow, weighted = weighted_cash_flows(ledger, rates, as_of, sell_policy)
    return mwr_percent(value, flow, weighted).quantize(PERCENT)


def compute_returns(
    ledger: Sequence[Transaction],
    rates: RateTable,
    prices: Mapping[str, Decimal],
    as_of: Optional[date] = None,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> PortfolioReturns:
    """Compute TWR and MWR over one (ledger, rates, prices) snapshot."""
    as_of = as_of or date.today()
    holdings = aggregate(ledger, rates, sell_policy)
    valuation = value_portfolio(holdings, prices, ledger, rates, sell_policy)
    invested = total_investment(ledger, rates)
    flow, weighted = weighted_cash_flows(ledger, rates, as_of, sell_policy)

    result = PortfolioReturns(
        as_of=as_of,
        total_investment=invested,
        current_value=valuation.total,
        total_cash_flow=flow,
        weighted_exposure=weighted,
    )
    result.twr = twr_percent(invested, valuation.total).quantize(PERCENT)
    result.mwr = mwr_percent(valuation.holdings_value, flow, weighted).quantize(PERCENT)
    for asset in valuation.missing_prices:
        result.warnings.append(f"No price for {asset}; valued at 0")
    return result
