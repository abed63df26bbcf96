"""Current market snapshot from the first provider that answers.

Providers are tried in order (DexScreener pairs, then CoinGecko price
index). No merging or averaging: the first well-formed, non-empty result
wins. A provider that errors or returns nothing is logged and skipped;
if all fail the snapshot is None ("market data unknown").
"""

from collections.abc import Sequence
from typing import Protocol

import httpx
from loguru import logger
from pydantic import ValidationError

from src.models.analysis import MarketSnapshot
from src.parsers.coingecko.client import CoinGeckoClient
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.dexscreener.models import highest_volume_pair
from src.parsers.exceptions import ProviderError


class MarketDataProvider(Protocol):
    name: str

    async def fetch(self, token_address: str) -> MarketSnapshot | None: ...


class DexScreenerMarketProvider:
    """Highest-volume DexScreener pair for the token."""

    name = "dexscreener"

    def __init__(self, client: DexScreenerClient) -> None:
        self._client = client

    async def fetch(self, token_address: str) -> MarketSnapshot | None:
        pair = highest_volume_pair(await self._client.get_token_pairs(token_address))
        if pair is None:
            return None

        market_cap = pair.marketCap or pair.fdv
        return MarketSnapshot(
            price=float(pair.priceUsd),
            market_cap=float(market_cap) if market_cap else None,
            volume_24h=pair.volume_h24,
            price_change_24h=pair.change_h24,
            source=self.name,
        )


class CoinGeckoMarketProvider:
    """CoinGecko price index keyed by contract address."""

    name = "coingecko"

    def __init__(self, client: CoinGeckoClient) -> None:
        self._client = client

    async def fetch(self, token_address: str) -> MarketSnapshot | None:
        entry = await self._client.get_token_price(token_address)
        if entry is None or entry.usd is None or entry.usd <= 0:
            return None

        return MarketSnapshot(
            price=float(entry.usd),
            market_cap=float(entry.usd_market_cap) if entry.usd_market_cap else None,
            volume_24h=float(entry.usd_24h_vol or 0),
            price_change_24h=float(entry.usd_24h_change or 0),
            source=self.name,
        )


async def fetch_market_data(
    providers: Sequence[MarketDataProvider],
    token_address: str,
) -> MarketSnapshot | None:
    """Return the first provider's snapshot, or None if every provider fails."""
    for provider in providers:
        try:
            snapshot = await provider.fetch(token_address)
        except (ProviderError, httpx.HTTPError, ValidationError, ValueError) as e:
            logger.debug(f"[MARKET] {provider.name} failed for {token_address[:12]}: {e}")
            continue

        if snapshot is not None and snapshot.price > 0:
            logger.debug(f"[MARKET] {token_address[:12]} priced by {provider.name}: ${snapshot.price}")
            return snapshot
        logger.debug(f"[MARKET] {provider.name} had no data for {token_address[:12]}")

    logger.info(f"[MARKET] No market data for {token_address[:12]}")
    return None
