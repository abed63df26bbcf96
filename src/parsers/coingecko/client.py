"""CoinGecko price index client: lookup by Solana contract address.

Used as the last market-data source when no DEX pair is indexed yet.
"""

import httpx
from pydantic import ValidationError

from src.parsers.coingecko.models import CoinGeckoTokenPrice
from src.parsers.exceptions import CoinGeckoError
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoClient:
    """Async client for the CoinGecko public API (demo key optional)."""

    def __init__(self, api_key: str = "", max_rps: float = 0.5, timeout: float = 10.0) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self._client = httpx.AsyncClient(base_url=BASE_URL, timeout=timeout, headers=headers)
        self._rate_limiter = RateLimiter(max_rps)

    async def get_token_price(self, contract_address: str) -> CoinGeckoTokenPrice | None:
        """Price, cap, 24h volume and change for one token. None if not listed."""
        params = {
            "contract_addresses": contract_address,
            "vs_currencies": "usd",
            "include_market_cap": "true",
            "include_24hr_vol": "true",
            "include_24hr_change": "true",
        }
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.get("/simple/token_price/solana", params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise CoinGeckoError(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CoinGeckoError(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise CoinGeckoError("Invalid JSON from token_price") from e

        if not isinstance(data, dict) or not data:
            return None

        # Keys are usually echoed back as sent, but match case-insensitively
        entry = data.get(contract_address)
        if entry is None:
            lowered = contract_address.lower()
            entry = next((v for k, v in data.items() if k.lower() == lowered), None)
        if entry is None:
            return None

        try:
            return CoinGeckoTokenPrice.model_validate(entry)
        except ValidationError as e:
            raise CoinGeckoError(f"Malformed token_price entry: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
