from decimal import Decimal

from pydantic import BaseModel


class DexScreenerToken(BaseModel):
    address: str
    name: str | None = None
    symbol: str | None = None

    model_config = {"extra": "ignore"}


class DexScreenerVolume(BaseModel):
    m5: Decimal | None = None
    h1: Decimal | None = None
    h6: Decimal | None = None
    h24: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerPriceChange(BaseModel):
    """Percent price change by window."""

    m5: Decimal | None = None
    h1: Decimal | None = None
    h6: Decimal | None = None
    h24: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerLiquidity(BaseModel):
    usd: Decimal | None = None

    model_config = {"extra": "ignore"}


class DexScreenerPair(BaseModel):
    chainId: str = ""
    dexId: str = ""
    pairAddress: str = ""
    baseToken: DexScreenerToken | None = None
    priceUsd: Decimal | None = None
    volume: DexScreenerVolume | None = None
    priceChange: DexScreenerPriceChange | None = None
    liquidity: DexScreenerLiquidity | None = None
    fdv: Decimal | None = None
    marketCap: Decimal | None = None

    model_config = {"extra": "ignore"}

    @property
    def volume_h24(self) -> float:
        return float(self.volume.h24) if self.volume and self.volume.h24 is not None else 0.0

    @property
    def change_h1(self) -> float:
        if self.priceChange and self.priceChange.h1 is not None:
            return float(self.priceChange.h1)
        return 0.0

    @property
    def change_h24(self) -> float:
        if self.priceChange and self.priceChange.h24 is not None:
            return float(self.priceChange.h24)
        return 0.0


def highest_volume_pair(pairs: list[DexScreenerPair]) -> DexScreenerPair | None:
    """Pair with the highest 24h volume among priced pairs."""
    priced = [p for p in pairs if p.priceUsd is not None and p.priceUsd > 0]
    if not priced:
        return None
    return max(priced, key=lambda p: p.volume_h24)
