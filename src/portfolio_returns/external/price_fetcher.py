"""Price fetching via yfinance for registered assets."""

import logging
from decimal import Decimal
from typing import Optional

import yfinance as yf

from ..core.exceptions import PriceFetchError
from ..core.models import CASH_ASSET
from ..core.registry import all_assets, ticker_for

logger = logging.getLogger(__name__)


class PriceFetcher:
    """Fetches latest prices (in the listing currency) via Yahoo Finance.

    Asset ids are mapped to Yahoo symbols through the asset registry,
    e.g. MOUTAI → 600519.SS, XIAOMI → 1810.HK.
    """

    def __init__(self, assets: Optional[dict[str, dict]] = None):
        self.assets = all_assets() if assets is None else assets

    @staticmethod
    def _try_fetch(symbol: str) -> Optional[Decimal]:
        """Try to get a price for a single Yahoo Finance symbol. Returns None on failure."""
        ticker = yf.Ticker(symbol)
        # Try fast_info first
        try:
            price = getattr(ticker.fast_info, "last_price", None)
            if price is not None and price > 0:
                return Decimal(str(price)).quantize(Decimal("0.0001"))
        except Exception as e:
            logger.debug("fast_info lookup for %s failed: %s", symbol, e)
        # Fallback to history
        try:
            hist = ticker.history(period="5d")
            if not hist.empty:
                return Decimal(str(hist["Close"].iloc[-1])).quantize(Decimal("0.0001"))
        except Exception as e:
            logger.debug("history lookup for %s failed: %s", symbol, e)
        return None

    def fetch_price(self, asset: str) -> Decimal:
        """Fetch the current price for one asset id.

        Raises:
            PriceFetchError: if Yahoo Finance returns no usable price.
        """
        symbol = ticker_for(asset, self.assets)
        price = self._try_fetch(symbol)
        if price is None:
            raise PriceFetchError(f"No price for {asset} ({symbol})")
        return price

    def fetch_batch(self, assets: Optional[list[str]] = None) -> dict[str, Optional[Decimal]]:
        """Fetch prices for several assets; failures map to None."""
        if assets is None:
            assets = list(self.assets)
        results: dict[str, Optional[Decimal]] = {}
        for asset in assets:
            if asset == CASH_ASSET:
                continue
            try:
                results[asset] = self.fetch_price(asset)
            except PriceFetchError as e:
                logger.warning("%s", e)
                results[asset] = None
        return results
