"""Conversion of native-currency amounts into the base currency.

Missing rates fail fast with MissingRateError.
"""

from decimal import Decimal, InvalidOperation
from typing import Mapping

from ..exceptions import InvalidRateTableError, MissingRateError
from ..models import Currency

RateTable = Mapping[Currency, Decimal]

BASE_CURRENCY = Currency.CNY


def to_base(amount: Decimal, currency, rates: RateTable) -> Decimal:
    """Convert amount in `currency` into the base currency.

    Raises:
        MissingRateError: if the currency has no entry in `rates`.
        UnsupportedCurrencyError: if `currency` is not a known code.
    """
    code = Currency.parse(currency)
    rate = rates.get(code)
    if rate is None:
        raise MissingRateError(code)
    return amount * rate


def make_rate_table(raw: Mapping, base=BASE_CURRENCY) -> dict[Currency, Decimal]:
    """Build a validated RateTable from a plain {code: number} mapping.

    The base currency must be present with a rate of exactly 1 and every
    other rate must be positive.
    """
    base = Currency.parse(base)
    table: dict[Currency, Decimal] = {}
    for code, value in raw.items():
        try:
            rate = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation:
            raise InvalidRateTableError(f"Rate for {code} is not a number: {value!r}") from None
        if not rate.is_finite() or rate <= 0:
            raise InvalidRateTableError(f"Rate for {code} must be positive, got {rate}")
        table[Currency.parse(code)] = rate
    if table.get(base) != Decimal("1"):
        raise InvalidRateTableError(f"Base currency {base.value} must map to 1")
    return table
