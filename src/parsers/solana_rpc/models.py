"""Pydantic models for Solana JSON-RPC token responses."""

from pydantic import BaseModel


class RpcTokenAccount(BaseModel):
    """Entry of getTokenLargestAccounts."""

    address: str
    amount: int  # raw, smallest unit
    decimals: int = 0
    uiAmount: float | None = None

    model_config = {"extra": "ignore"}
