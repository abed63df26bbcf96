"""Pydantic models for Jupiter Quote and Price API responses."""

from decimal import Decimal

from pydantic import BaseModel


class JupiterQuote(BaseModel):
    """Response from /swap/v1/quote. Only the numeric fields are read."""

    inputMint: str = ""
    outputMint: str = ""
    inAmount: int = 0
    outAmount: int = 0
    slippageBps: int = 0
    swapMode: str = "ExactIn"
    priceImpactPct: Decimal | None = None

    model_config = {"extra": "ignore"}


class JupiterPrice(BaseModel):
    """Price data for a single token from Jupiter."""

    id: str  # mint address
    price: Decimal | None = None

    model_config = {"extra": "ignore"}
