"""CoinGecko price feed

Fetches USD prices and market caps for the base token and every reward
token in a single ``/simple/price`` request.

Reference: https://docs.coingecko.com/reference/simple-price
"""

import logging
import os
from typing import Dict, Optional, Sequence

import requests

from aurora_staking.adapters.base import PriceOracle
from aurora_staking.errors import ReadFailure
from aurora_staking.models import PriceQuote

logger = logging.getLogger(__name__)

COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
COINGECKO_API_KEY = os.environ.get("COINGECKO_API_KEY", "")

# Tokens without a market listing
# Format: key -> (price, market_cap)
UNLISTED_TOKENS = {
    'vote': (0.0, 0.0),  # VOTE is non-transferable
}


class CoinGeckoPriceOracle(PriceOracle):
    """PriceOracle backed by the CoinGecko public API"""

    def __init__(self, api_url: str = COINGECKO_API_URL, api_key: Optional[str] = None,
                 timeout: float = 15):
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "aurora-staking/1.0",
            "Accept": "application/json",
        })
        api_key = COINGECKO_API_KEY if api_key is None else api_key
        if api_key:
            self.session.headers["x-cg-demo-api-key"] = api_key

    def _fetch(self, ids: Sequence[str]) -> Dict[str, Dict]:
        if not ids:
            return {}
        try:
            response = self.session.get(
                f"{self.api_url}/simple/price",
                params={
                    "ids": ",".join(ids),
                    "vs_currencies": "usd",
                    "include_market_cap": "true",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ReadFailure("coingecko /simple/price", str(e)) from e

        if not isinstance(data, dict):
            raise ReadFailure("coingecko /simple/price", f"unexpected payload {data!r}")
        return data

    def get_prices(self, keys: Sequence[str]) -> PriceQuote:
        listed = sorted({k for k in keys if k not in UNLISTED_TOKENS})
        data = self._fetch(listed)

        prices = []
        market_caps = []
        for key in keys:
            if key in UNLISTED_TOKENS:
                price, market_cap = UNLISTED_TOKENS[key]
            else:
                entry = data.get(key) or {}
                price = entry.get("usd")
                market_cap = entry.get("usd_market_cap")
                if price is None:
                    logger.warning(f"No CoinGecko price for {key}")
            prices.append(float(price) if price is not None else None)
            market_caps.append(float(market_cap) if market_cap is not None else None)

        logger.debug(f"CoinGecko prices {dict(zip(keys, prices))}")
        return PriceQuote(prices=tuple(prices), market_caps=tuple(market_caps))
