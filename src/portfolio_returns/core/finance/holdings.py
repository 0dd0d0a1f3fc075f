"""Reduce a transaction ledger into per-asset positions and invested capital.

Holdings are rebuilt from the full ledger on every call; nothing here keeps
state between calls.
"""

from decimal import Decimal
from typing import Iterable

from ..exceptions import InsufficientSharesError
from ..models import Holding, SellPolicy, Transaction, TransactionType
from .currency import RateTable, to_base


def aggregate(
    ledger: Iterable[Transaction],
    rates: RateTable,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
) -> dict[str, Holding]:
    """Build current holdings by walking the ledger in insertion order.

    BUY adds shares and base-currency cost. SUBSCRIBE/REDEEM are pure cash
    flows and never create a holding. SELL is skipped under
    SellPolicy.IGNORE; under SellPolicy.DECREMENT it removes shares and
    the matching share of cost basis at average cost.

    Args:
        ledger: Transactions in insertion order (not necessarily by date).
        rates: Rate snapshot used for every conversion in this call.
        sell_policy: Treatment of SELL rows.

    Returns:
        Dict mapping asset id to Holding. Insertion order follows the
        first BUY of each asset.

    Raises:
        MissingRateError: a BUY (or counted SELL) currency has no rate.
        InsufficientSharesError: DECREMENT sell larger than the position.
    """
    holdings: dict[str, Holding] = {}
    for t in ledger:
        if t.transaction_type == TransactionType.BUY:
            h = holdings.setdefault(t.asset, Holding(asset=t.asset))
            h.shares += t.shares
            h.cost_basis += to_base(t.shares * t.price, t.currency, rates)
        elif t.transaction_type == TransactionType.SELL and sell_policy == SellPolicy.DECREMENT:
            h = holdings.get(t.asset)
            held = h.shares if h else Decimal("0")
            if t.shares > held:
                raise InsufficientSharesError(
                    f"Transaction {t.id}: cannot sell {t.shares} {t.asset}, only {held} held"
                )
            if h is None:
                continue
            h.cost_basis -= h.average_cost * t.shares
            h.shares -= t.shares
    return holdings


def total_buy_cost(ledger: Iterable[Transaction], rates: RateTable) -> Decimal:
    """Sum of base-currency cost over all BUY rows. Independent of order."""
    return sum(
        (
            to_base(t.shares * t.price, t.currency, rates)
            for t in ledger
            if t.transaction_type == TransactionType.BUY
        ),
        Decimal("0"),
    )


def net_cash_flow(ledger: Iterable[Transaction], rates: RateTable) -> Decimal:
    """SUBSCRIBE amounts minus REDEEM amounts, in base currency.

    The cash amount of these rows lives in `price`; `shares` is ignored.
    """
    total = Decimal("0")
    for t in ledger:
        if t.transaction_type == TransactionType.SUBSCRIBE:
            total += to_base(t.price, t.currency, rates)
        elif t.transaction_type == TransactionType.REDEEM:
            total -= to_base(t.price, t.currency, rates)
    return total


def sale_proceeds(ledger: Iterable[Transaction], rates: RateTable) -> Decimal:
    """Base-currency proceeds of all SELL rows (shares × price)."""
    return sum(
        (
            to_base(t.shares * t.price, t.currency, rates)
            for t in ledger
            if t.transaction_type == TransactionType.SELL
        ),
        Decimal("0"),
    )


def total_investment(ledger: Iterable[Transaction], rates: RateTable) -> Decimal:
    """Capital put into the portfolio: BUY costs plus net cash flow."""
    ledger = list(ledger)
    return total_buy_cost(ledger, rates) + net_cash_flow(ledger, rates)
