"""Price series for charting, preferring real history over reconstruction.

Cascade (first success wins, re-run on every timeframe request):
1. Birdeye historical buckets, mapped as-is.
2. Jupiter current price -> trend synthesis around it.
3. DexScreener price + 1h/24h change -> change-weighted backfill.
4. Pure synthetic random walk.

Branches 2-4 are reconstructions, not market data. Randomness comes from
an injected random.Random so a seeded source replays the same series.
"""

import math
import random
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import httpx
from loguru import logger
from pydantic import ValidationError

from src.models.analysis import PricePoint, PriceSeries
from src.parsers.birdeye.client import BirdeyeClient
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.dexscreener.models import highest_volume_pair
from src.parsers.exceptions import ProviderError
from src.parsers.jupiter.client import JupiterClient

MINUTE_MS = 60_000
HOUR_MS = 3_600_000

# Fixed supply proxy for market cap of charted points (not circulating supply)
MARKET_CAP_SUPPLY_PROXY = 1_000_000_000

MIN_PRICE = 1e-6
TREND_PRICE_FLOOR_RATIO = 0.7


@dataclass(frozen=True)
class TimeframeSpec:
    label: str
    points: int
    interval_ms: int
    volatility: float
    history_interval: str  # Birdeye bucket type
    date_format: str


TIMEFRAMES: dict[str, TimeframeSpec] = {
    "1H": TimeframeSpec("1H", 60, MINUTE_MS, 0.002, "1m", "%H:%M"),
    "24H": TimeframeSpec("24H", 24, HOUR_MS, 0.03, "1H", "%H:%M"),
    "7D": TimeframeSpec("7D", 168, HOUR_MS, 0.08, "1H", "%m/%d %H:%M"),
}
DEFAULT_TIMEFRAME = TimeframeSpec("30D", 720, HOUR_MS, 0.08, "1H", "%m/%d")


def timeframe_spec(timeframe: str) -> TimeframeSpec:
    """Parameters for a timeframe label; anything unknown gets the 720-point default."""
    return TIMEFRAMES.get(timeframe.strip().upper(), DEFAULT_TIMEFRAME)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _above_floor(price: float, floor: float) -> float:
    """Clamp to strictly above the floor (the next representable float)."""
    return price if price > floor else math.nextafter(floor, math.inf)


def _point(timestamp: int, price: float, volume: float, spec: TimeframeSpec,
           market_cap: float | None = None) -> PricePoint:
    return PricePoint(
        timestamp=timestamp,
        price=price,
        volume=volume,
        market_cap=market_cap if market_cap is not None else price * MARKET_CAP_SUPPLY_PROXY,
        date=datetime.fromtimestamp(timestamp / 1000).strftime(spec.date_format),
    )


# ── Reconstructions ────────────────────────────────────────────────────


def trend_synthesis(
    current_price: float,
    spec: TimeframeSpec,
    now_ms: int,
    rng: random.Random,
) -> list[PricePoint]:
    """Wave-plus-noise curve around a known current price."""
    count = spec.points
    vol = spec.volatility
    floor = current_price * TREND_PRICE_FLOOR_RATIO

    points = []
    for i in range(count, -1, -1):
        multiplier = (
            1
            + math.sin(i / (count / 6)) * vol * 0.3
            + rng.uniform(-vol / 2, vol / 2)
            + math.cos(i / (count / 3)) * vol * 0.2
        )
        price = _above_floor(current_price * multiplier, floor)
        volume = 50_000 + rng.random() * 200_000
        points.append(_point(now_ms - i * spec.interval_ms, price, volume, spec))
    return points


def change_weighted_backfill(
    current_price: float,
    change_1h_pct: float,
    change_24h_pct: float,
    volume_24h: float,
    spec: TimeframeSpec,
    now_ms: int,
    rng: random.Random,
) -> list[PricePoint]:
    """Back out historical prices from reported percent changes.

    The applicable change is scaled linearly by how far back the point is,
    so the oldest point carries the full change and the newest none.
    """
    count = spec.points
    if spec.label == "1H":
        change_pct = change_1h_pct
    elif spec.label == "24H":
        change_pct = change_24h_pct
    elif spec.label == "7D":
        change_pct = change_24h_pct * 4  # extrapolated, no weekly figure available
    else:
        change_pct = 0.0

    points = []
    for i in range(count, -1, -1):
        scaled_change = change_pct / 100 * (i / count)
        denominator = 1 + scaled_change
        historical = current_price / denominator if denominator > 0 else current_price
        price = _above_floor(historical * (1 + rng.uniform(-0.005, 0.005)), MIN_PRICE)
        volume = max(volume_24h / count * (0.4 + rng.random() * 1.2), 1000)
        points.append(_point(now_ms - i * spec.interval_ms, price, volume, spec))
    return points


def synthetic_series(spec: TimeframeSpec, now_ms: int, rng: random.Random) -> list[PricePoint]:
    """Last resort: random walk around a random base price."""
    base_price = 0.00001 + rng.random() * 0.01009

    points = []
    for i in range(spec.points, -1, -1):
        trend = math.sin(i / 10) * 0.02
        spread = 0.05 + rng.random() * 0.1
        walk = (rng.random() - 0.5) * spread
        price = _above_floor(base_price * (1 + trend + walk), MIN_PRICE)
        volume = 10_000 + rng.random() * 50_000
        points.append(_point(now_ms - i * spec.interval_ms, price, volume, spec))
    return points


# ── Providers ──────────────────────────────────────────────────────────


class PriceHistoryProvider(Protocol):
    name: str

    async def fetch(
        self,
        token_address: str,
        spec: TimeframeSpec,
        now_ms: int,
        rng: random.Random,
    ) -> list[PricePoint] | None: ...


class BirdeyeHistoryProvider:
    name = "birdeye"

    def __init__(self, client: BirdeyeClient) -> None:
        self._client = client

    async def fetch(
        self, token_address: str, spec: TimeframeSpec, now_ms: int, rng: random.Random
    ) -> list[PricePoint] | None:
        time_to = now_ms // 1000
        time_from = time_to - spec.points * spec.interval_ms // 1000
        items = await self._client.get_history_price(
            token_address, spec.history_interval, time_from, time_to
        )
        points = [
            _point(
                item.unixTime * 1000,
                float(item.value),
                float(item.volume or 0),
                spec,
                market_cap=float(item.marketCap) if item.marketCap is not None else None,
            )
            for item in sorted(items, key=lambda it: it.unixTime)
            if item.value > 0
        ]
        return points or None


class JupiterTrendProvider:
    name = "jupiter"

    def __init__(self, client: JupiterClient) -> None:
        self._client = client

    async def fetch(
        self, token_address: str, spec: TimeframeSpec, now_ms: int, rng: random.Random
    ) -> list[PricePoint] | None:
        quote = await self._client.get_price(token_address)
        if quote is None or quote.price is None or quote.price <= 0:
            return None
        return trend_synthesis(float(quote.price), spec, now_ms, rng)


class DexScreenerBackfillProvider:
    name = "dexscreener"

    def __init__(self, client: DexScreenerClient) -> None:
        self._client = client

    async def fetch(
        self, token_address: str, spec: TimeframeSpec, now_ms: int, rng: random.Random
    ) -> list[PricePoint] | None:
        pair = highest_volume_pair(await self._client.get_token_pairs(token_address))
        if pair is None:
            return None
        return change_weighted_backfill(
            float(pair.priceUsd),
            pair.change_h1,
            pair.change_h24,
            pair.volume_h24,
            spec,
            now_ms,
            rng,
        )


class PriceHistorySynthesizer:
    """Runs the provider cascade for one timeframe per call. Holds no series."""

    def __init__(
        self,
        providers: Sequence[PriceHistoryProvider],
        *,
        rng: random.Random | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._providers = list(providers)
        self._rng = rng or random.Random()
        self._clock = clock

    async def build(self, token_address: str, timeframe: str) -> PriceSeries:
        spec = timeframe_spec(timeframe)
        now_ms = self._clock()

        for provider in self._providers:
            try:
                points = await provider.fetch(token_address, spec, now_ms, self._rng)
            except (ProviderError, httpx.HTTPError, ValidationError, ValueError) as e:
                logger.debug(f"[HISTORY] {provider.name} failed for {token_address[:12]}: {e}")
                continue
            if points:
                logger.debug(
                    f"[HISTORY] {token_address[:12]} {spec.label}: "
                    f"{len(points)} points from {provider.name}"
                )
                return PriceSeries(timeframe=timeframe, source=provider.name, points=points)

        logger.info(f"[HISTORY] {token_address[:12]} {spec.label}: using synthetic series")
        return PriceSeries(
            timeframe=timeframe,
            source="synthetic",
            points=synthetic_series(spec, now_ms, self._rng),
        )
