"""Exchange-rate fetching via the exchangerate-api.com free endpoint."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

import requests

from ..core.config import get_config
from ..core.exceptions import RateFetchError
from ..core.models import Currency

logger = logging.getLogger(__name__)


class RateFetcher:
    """Fetches "base currency per unit" conversion factors.

    The API quotes units of each currency per one base unit
    (CNY → HKD ≈ 1.09), so every quote is inverted to get the factor that
    to_base() multiplies by (HKD → CNY ≈ 0.92).
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
    ):
        cfg = get_config()
        self.api_url = (api_url or cfg.rates_api_url).rstrip("/")
        self.timeout = cfg.request_timeout if timeout is None else timeout
        self.retries = cfg.fetch_retries if retries is None else retries

    def _get(self, base: str) -> dict:
        last_error: Optional[Exception] = None
        for attempt in range(self.retries + 1):
            try:
                resp = requests.get(f"{self.api_url}/{base}", timeout=self.timeout)
                resp.raise_for_status()
                return resp.json()
            except (requests.RequestException, ValueError) as e:
                last_error = e
                logger.info("Rate fetch attempt %d for %s failed: %s", attempt + 1, base, e)
        raise RateFetchError(f"Failed to fetch exchange rates for {base}: {last_error}")

    def fetch_rates(self, base=Currency.CNY) -> dict[Currency, Decimal]:
        """Fetch a full RateTable for every supported currency.

        Raises:
            RateFetchError: network failure, bad payload, or a missing quote.
        """
        base = Currency.parse(base)
        data = self._get(base.value)
        quotes = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(quotes, dict):
            raise RateFetchError("Exchange-rate response has no 'rates' table")

        table: dict[Currency, Decimal] = {base: Decimal("1")}
        for code in Currency:
            if code == base:
                continue
            quote = quotes.get(code.value)
            try:
                per_base = Decimal(str(quote))
            except InvalidOperation:
                raise RateFetchError(f"No usable quote for {code.value}: {quote!r}") from None
            if not per_base.is_finite() or per_base <= 0:
                raise RateFetchError(f"No usable quote for {code.value}: {quote!r}")
            table[code] = (Decimal("1") / per_base).quantize(Decimal("0.000001"))
        return table
