"""Seed ledger shown on first start, before the user enters anything."""

from datetime import date
from decimal import Decimal

from ..core.models import CASH_ASSET, Currency, Transaction, TransactionType


def demo_ledger() -> list[Transaction]:
    return [
        Transaction(
            id=1, transaction_date=date(2024, 1, 15), transaction_type=TransactionType.BUY,
            asset="MOUTAI", shares=Decimal("10"), price=Decimal("1650"), currency=Currency.CNY,
        ),
        Transaction(
            id=2, transaction_date=date(2024, 3, 20), transaction_type=TransactionType.BUY,
            asset="XIAOMI", shares=Decimal("1000"), price=Decimal("18.5"), currency=Currency.HKD,
        ),
        Transaction(
            id=3, transaction_date=date(2024, 6, 10), transaction_type=TransactionType.SUBSCRIBE,
            asset=CASH_ASSET, shares=Decimal("0"), price=Decimal("50000"), currency=Currency.CNY,
        ),
    ]
