"""Portfolio return calculations.

Pure functions for currency conversion, holdings aggregation, valuation
and returns. No I/O.

Usage:
    from portfolio_returns.core.finance import compute_returns, to_base
"""

from .currency import BASE_CURRENCY, make_rate_table, to_base
from .holdings import aggregate, net_cash_flow, total_buy_cost, total_investment
from .returns import calculate_mwr, calculate_twr, compute_returns
from .valuation import asset_currency, current_value, holdings_value, value_portfolio

__all__ = [
    "BASE_CURRENCY",
    "to_base",
    "make_rate_table",
    "aggregate",
    "total_buy_cost",
    "net_cash_flow",
    "total_investment",
    "asset_currency",
    "holdings_value",
    "value_portfolio",
    "current_value",
    "calculate_twr",
    "calculate_mwr",
    "compute_returns",
]
