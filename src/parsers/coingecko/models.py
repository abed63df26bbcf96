"""Pydantic models for CoinGecko simple token price responses."""

from decimal import Decimal

from pydantic import BaseModel


class CoinGeckoTokenPrice(BaseModel):
    """Entry of /simple/token_price/solana keyed by contract address."""

    usd: Decimal | None = None
    usd_market_cap: Decimal | None = None
    usd_24h_vol: Decimal | None = None
    usd_24h_change: Decimal | None = None

    model_config = {"extra": "ignore"}
