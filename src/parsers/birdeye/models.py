"""Pydantic models for Birdeye Data Services API responses."""

from decimal import Decimal

from pydantic import BaseModel


class BirdeyeHistoryItem(BaseModel):
    """Single bucket from /defi/history_price."""

    unixTime: int  # unix seconds
    value: Decimal  # USD price
    volume: Decimal | None = None
    marketCap: Decimal | None = None

    model_config = {"extra": "ignore"}
