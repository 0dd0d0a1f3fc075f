"""Custom exceptions for the return calculator."""


class PortfolioReturnsError(Exception):
    """Base exception."""
    pass


class MissingRateError(PortfolioReturnsError):
    """A ledger currency has no entry in the rate table."""

    def __init__(self, currency):
        self.currency = currency
        code = getattr(currency, "value", currency)
        super().__init__(f"No exchange rate for {code}")


class UnsupportedCurrencyError(PortfolioReturnsError):
    pass


class InvalidRateTableError(PortfolioReturnsError):
    pass


class InvalidPriceTableError(PortfolioReturnsError):
    pass


class InvalidTransactionError(PortfolioReturnsError):
    pass


class UnknownAssetError(InvalidTransactionError):
    pass


class DuplicateTransactionError(InvalidTransactionError):
    pass


class TransactionNotFoundError(InvalidTransactionError):
    pass


class InsufficientSharesError(InvalidTransactionError):
    pass


class RateFetchError(PortfolioReturnsError):
    pass


class PriceFetchError(PortfolioReturnsError):
    pass
