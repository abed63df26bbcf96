"""Birdeye Data Services API client: historical price buckets.

Requires an API key. Single attempt per request; errors surface as
BirdeyeApiError so the price-history cascade can move to the next source.
"""

from typing import Any

import httpx
from pydantic import ValidationError

from src.parsers.birdeye.models import BirdeyeHistoryItem
from src.parsers.exceptions import BirdeyeApiError
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://public-api.birdeye.so"


class BirdeyeClient:
    """Async client for Birdeye Data Services API."""

    def __init__(self, api_key: str, max_rps: float = 10.0, timeout: float = 15.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=timeout,
            headers={
                "X-API-KEY": api_key,
                "Accept": "application/json",
                "x-chain": "solana",
            },
        )

    async def _request(self, path: str, params: dict[str, Any]) -> Any:
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise BirdeyeApiError(f"Request failed: {path}: {type(e).__name__}: {e}") from e

        if resp.status_code == 401:
            raise BirdeyeApiError("Invalid API key (401)")
        if resp.status_code == 429:
            raise BirdeyeApiError("Rate limited (429)")
        if resp.status_code != 200:
            raise BirdeyeApiError(f"HTTP {resp.status_code}: {path}")

        try:
            data = resp.json()
        except ValueError as e:
            raise BirdeyeApiError(f"Invalid JSON: {path}") from e
        if not isinstance(data, dict):
            raise BirdeyeApiError(f"Unexpected payload: {path}")
        if not data.get("success", True):
            raise BirdeyeApiError(f"API error: {data.get('message', 'unknown')}")
        return data.get("data", data)

    async def get_history_price(
        self,
        address: str,
        interval: str,
        time_from: int,
        time_to: int,
    ) -> list[BirdeyeHistoryItem]:
        """Fetch time-bucketed prices.

        interval: "1m", "5m", "15m", "30m", "1H", "4H", "1D" ...
        time_from / time_to: unix seconds.
        """
        data = await self._request(
            "/defi/history_price",
            params={
                "address": address,
                "address_type": "token",
                "type": interval,
                "time_from": time_from,
                "time_to": time_to,
            },
        )
        items = data.get("items", []) if isinstance(data, dict) else []
        try:
            return [BirdeyeHistoryItem.model_validate(item) for item in items]
        except ValidationError as e:
            raise BirdeyeApiError(f"Malformed history item: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
