"""Data models for the return calculator."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from .exceptions import InvalidTransactionError, UnsupportedCurrencyError

CASH_ASSET = "CASH"

# Chinese labels accepted on input
_CASH_ALIASES = {"cash", "现金"}


class Currency(str, Enum):
    CNY = "CNY"  # base
    HKD = "HKD"
    USD = "USD"

    @classmethod
    def parse(cls, value) -> "Currency":
        if isinstance(value, Currency):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedCurrencyError(f"Unsupported currency: {value!r}") from None


class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"
    SUBSCRIBE = "subscribe"  # cash paid into the portfolio
    REDEEM = "redeem"        # cash taken out of the portfolio

    @classmethod
    def parse(cls, value) -> "TransactionType":
        if isinstance(value, TransactionType):
            return value
        label = str(value).strip()
        if label in _TYPE_ALIASES:
            return _TYPE_ALIASES[label]
        try:
            return cls(label.lower())
        except ValueError:
            raise InvalidTransactionError(f"Unknown transaction type: {value!r}") from None

    @property
    def is_cash_flow(self) -> bool:
        return self in (TransactionType.SUBSCRIBE, TransactionType.REDEEM)


_TYPE_ALIASES = {
    "买入": TransactionType.BUY,
    "卖出": TransactionType.SELL,
    "申购": TransactionType.SUBSCRIBE,
    "赎回": TransactionType.REDEEM,
}


class SellPolicy(str, Enum):
    """How SELL rows affect holdings and returns.

    IGNORE reproduces the classic calculator: sells are recorded but
    never reduce shares, cost or cash. DECREMENT reduces the position
    at average cost and keeps the sale proceeds as portfolio cash.
    """
    IGNORE = "ignore"
    DECREMENT = "decrement"


def normalize_asset(asset: str) -> str:
    name = str(asset).strip()
    if name.lower() in _CASH_ALIASES:
        return CASH_ASSET
    return name


def _to_decimal(value, field_name: str) -> Decimal:
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidTransactionError(f"{field_name} is not a number: {value!r}") from None
    if not number.is_finite():
        raise InvalidTransactionError(f"{field_name} must be a finite number, got {value!r}")
    return number


@dataclass(frozen=True)
class Transaction:
    id: int
    transaction_date: date
    transaction_type: TransactionType
    asset: str
    shares: Decimal
    price: Decimal
    currency: Currency = Currency.CNY

    def __post_init__(self):
        # Coerce loosely typed input (CSV cells, form values) into closed types
        set_ = object.__setattr__
        if isinstance(self.transaction_date, str):
            try:
                set_(self, "transaction_date", date.fromisoformat(self.transaction_date))
            except ValueError:
                raise InvalidTransactionError(
                    f"Invalid date {self.transaction_date!r}. Use YYYY-MM-DD"
                ) from None
        set_(self, "transaction_type", TransactionType.parse(self.transaction_type))
        set_(self, "currency", Currency.parse(self.currency))
        set_(self, "asset", normalize_asset(self.asset))
        set_(self, "shares", _to_decimal(self.shares, "shares"))
        set_(self, "price", _to_decimal(self.price, "price"))

        if not self.asset:
            raise InvalidTransactionError(f"Transaction {self.id}: asset is empty")
        if self.shares < 0 or self.price < 0:
            raise InvalidTransactionError(
                f"Transaction {self.id}: shares and price must be non-negative"
            )

    @property
    def total_value(self) -> Decimal:
        """Native-currency amount: shares × price for trades, price for cash rows."""
        gross = self.shares * self.price
        return gross if gross else self.price

    @property
    def is_cash(self) -> bool:
        return self.asset == CASH_ASSET


@dataclass
class Holding:
    asset: str
    shares: Decimal = Decimal("0")
    cost_basis: Decimal = Decimal("0")  # base currency

    @property
    def average_cost(self) -> Decimal:
        if self.shares == 0:
            return Decimal("0")
        return self.cost_basis / self.shares


@dataclass
class Valuation:
    """Breakdown of a current portfolio value, all in base currency."""
    holdings_value: Decimal = Decimal("0")
    net_cash_flow: Decimal = Decimal("0")
    sale_proceeds: Decimal = Decimal("0")
    missing_prices: list[str] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return self.holdings_value + self.net_cash_flow + self.sale_proceeds


@dataclass
class PortfolioReturns:
    twr: Decimal = Decimal("0")  # percent
    mwr: Decimal = Decimal("0")  # percent
    as_of: Optional[date] = None
    total_investment: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    total_cash_flow: Decimal = Decimal("0")
    weighted_exposure: Decimal = Decimal("0")
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, float]:
        return {"twr": float(self.twr), "mwr": float(self.mwr)}
