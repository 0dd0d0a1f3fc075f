"""Push freshly fetched rates and prices into a ReturnCalculator.

A failed fetch never blocks the calculator: the error is logged and the
last-known table (initially the configured seed) stays in place.
"""

import logging
from typing import Optional

from ..core.calculator import ReturnCalculator
from ..core.exceptions import PortfolioReturnsError
from .price_fetcher import PriceFetcher
from .rate_fetcher import RateFetcher

logger = logging.getLogger(__name__)


def refresh_rates(calc: ReturnCalculator, fetcher: Optional[RateFetcher] = None) -> bool:
    """Replace the calculator's rate table. Returns False if it was kept."""
    fetcher = fetcher or RateFetcher()
    try:
        table = fetcher.fetch_rates(calc.base_currency)
        calc.set_rates(table)
    except PortfolioReturnsError as e:
        logger.error("Exchange-rate refresh failed, keeping last-known rates: %s", e)
        return False
    return True


def refresh_prices(calc: ReturnCalculator, fetcher: Optional[PriceFetcher] = None) -> list[str]:
    """Replace the calculator's price table.

    Assets whose fetch failed keep their last-known price. Returns the ids
    that could not be refreshed.
    """
    fetcher = fetcher or PriceFetcher(calc.assets)
    fetched = fetcher.fetch_batch(list(calc.assets))
    merged = dict(calc.prices)
    failed = []
    for asset, price in fetched.items():
        if price is None:
            failed.append(asset)
        else:
            merged[asset] = price
    if failed:
        logger.error("Price refresh failed for %s, keeping last-known prices", ", ".join(failed))
    calc.set_prices(merged)
    return failed
