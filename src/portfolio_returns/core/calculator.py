"""Caller-owned state container around the pure return functions."""

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional

from .config import get_config
from .exceptions import (
    DuplicateTransactionError,
    InvalidPriceTableError,
    InvalidTransactionError,
    TransactionNotFoundError,
)
from .finance import aggregate, compute_returns, make_rate_table, value_portfolio
from .models import Currency, Holding, PortfolioReturns, SellPolicy, Transaction, Valuation
from .registry import all_assets, resolve_asset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """One consistent set of inputs. Replaced wholesale, never mutated."""
    ledger: tuple[Transaction, ...] = ()
    rates: Mapping[Currency, Decimal] = field(default_factory=dict)
    prices: Mapping[str, Decimal] = field(default_factory=dict)


class ReturnCalculator:
    """Holds the current ledger, rate table and price table.

    Every setter validates its input and swaps in a new Snapshot; every
    read takes the snapshot reference once, so a fetch landing mid-way
    through get_returns() cannot mix old and new tables.
    """

    def __init__(
        self,
        ledger: Iterable[Transaction] = (),
        rates: Optional[Mapping] = None,
        prices: Optional[Mapping] = None,
        sell_policy: Optional[SellPolicy] = None,
        assets: Optional[dict[str, dict]] = None,
    ):
        cfg = get_config()
        self.base_currency = Currency.parse(cfg.base_currency)
        self.sell_policy = SellPolicy(sell_policy or cfg.sell_policy)
        self.assets = all_assets() if assets is None else assets
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self.set_rates(cfg.default_rates if rates is None else rates)
        self.set_prices(cfg.default_prices if prices is None else prices)
        self.set_ledger(ledger)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def ledger(self) -> tuple[Transaction, ...]:
        return self._snapshot.ledger

    @property
    def rates(self) -> Mapping[Currency, Decimal]:
        return self._snapshot.rates

    @property
    def prices(self) -> Mapping[str, Decimal]:
        return self._snapshot.prices

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _validated_ledger(self, transactions: Iterable[Transaction]) -> tuple[Transaction, ...]:
        ledger = []
        seen: set = set()
        for t in transactions:
            if not isinstance(t, Transaction):
                raise InvalidTransactionError(f"Not a Transaction: {t!r}")
            if t.id in seen:
                raise DuplicateTransactionError(f"Duplicate transaction id {t.id}")
            seen.add(t.id)
            asset = resolve_asset(t.asset, self.assets)
            if asset != t.asset:
                t = dataclasses.replace(t, asset=asset)
            ledger.append(t)
        return tuple(ledger)

    def _swap(self, **changes) -> None:
        with self._lock:
            self._snapshot = dataclasses.replace(self._snapshot, **changes)

    def set_ledger(self, transactions: Iterable[Transaction]) -> None:
        """Replace the whole ledger. Rejects unknown assets and duplicate ids."""
        self._swap(ledger=self._validated_ledger(transactions))

    def set_rates(self, table: Mapping) -> None:
        """Replace the rate table. The base currency must map to 1."""
        self._swap(rates=make_rate_table(table, base=self.base_currency))

    def set_prices(self, table: Mapping) -> None:
        """Replace the price table. Keys may be asset ids or display names."""
        prices: dict[str, Decimal] = {}
        for asset, value in table.items():
            try:
                price = value if isinstance(value, Decimal) else Decimal(str(value))
            except InvalidOperation:
                raise InvalidPriceTableError(f"Price for {asset} is not a number: {value!r}") from None
            if not price.is_finite() or price < 0:
                raise InvalidPriceTableError(f"Price for {asset} must be a non-negative number, got {value!r}")
            prices[resolve_asset(str(asset), self.assets)] = price
        self._swap(prices=prices)

    # ------------------------------------------------------------------
    # Ledger editing
    # ------------------------------------------------------------------

    def next_transaction_id(self) -> int:
        ids = [t.id for t in self.ledger if isinstance(t.id, int)]
        return max(ids, default=0) + 1

    def add_transaction(self, transaction: Transaction) -> Transaction:
        with self._lock:
            ledger = self._validated_ledger(self._snapshot.ledger + (transaction,))
            self._snapshot = dataclasses.replace(self._snapshot, ledger=ledger)
        return ledger[-1]

    def update_transaction(self, transaction_id, **changes) -> Transaction:
        """Replace one transaction with an edited copy (fields as keyword args)."""
        with self._lock:
            ledger = list(self._snapshot.ledger)
            for i, t in enumerate(ledger):
                if t.id == transaction_id:
                    ledger[i] = dataclasses.replace(t, **changes)
                    break
            else:
                raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
            validated = self._validated_ledger(ledger)
            self._snapshot = dataclasses.replace(self._snapshot, ledger=validated)
        return validated[i]

    def delete_transaction(self, transaction_id) -> None:
        with self._lock:
            ledger = tuple(t for t in self._snapshot.ledger if t.id != transaction_id)
            if len(ledger) == len(self._snapshot.ledger):
                raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
            self._snapshot = dataclasses.replace(self._snapshot, ledger=ledger)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    def holdings(self) -> dict[str, Holding]:
        snap = self._snapshot
        return aggregate(snap.ledger, snap.rates, self.sell_policy)

    def valuation(self) -> Valuation:
        snap = self._snapshot
        holdings = aggregate(snap.ledger, snap.rates, self.sell_policy)
        return value_portfolio(holdings, snap.prices, snap.ledger, snap.rates, self.sell_policy)

    def get_returns(self, as_of: Optional[date] = None) -> PortfolioReturns:
        """TWR and MWR (percent, 2 decimals) over the current snapshot.

        Raises:
            MissingRateError: a ledger currency is absent from the rate table.
        """
        snap = self._snapshot
        result = compute_returns(
            snap.ledger, snap.rates, snap.prices, as_of=as_of, sell_policy=self.sell_policy
        )
        logger.debug(
            "Returns as of %s: twr=%s%% mwr=%s%% (%d transactions)",
            result.as_of, result.twr, result.mwr, len(snap.ledger),
        )
        return result

