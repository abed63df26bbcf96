"""Jupiter API client: swap quotes for the honeypot probe and price index.

Quotes via /swap/v1/quote, pricing via /price/v2. No automatic retries:
a failed quote is a probe finding, not something to paper over.
"""

from decimal import Decimal, InvalidOperation

import httpx
from loguru import logger
from pydantic import ValidationError

from src.models.analysis import QuoteResult
from src.parsers.exceptions import QuoteServiceError
from src.parsers.jupiter.models import JupiterPrice, JupiterQuote
from src.parsers.rate_limiter import RateLimiter

PRICE_URL = "https://api.jup.ag/price/v2"
QUOTE_URL = "https://api.jup.ag/swap/v1/quote"
# Wrapped SOL mint address
WSOL_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 1_000_000_000


class JupiterClient:
    """Async HTTP client for Jupiter APIs (free tier: 1 RPS)."""

    def __init__(
        self,
        api_key: str = "",
        max_rps: float = 1.0,
        timeout: float = 10.0,
        *,
        quote_url: str = QUOTE_URL,
        price_url: str = PRICE_URL,
    ) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._quote_url = quote_url
        self._price_url = price_url
        headers: dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        *,
        slippage_bps: int,
        swap_mode: str = "ExactIn",
    ) -> QuoteResult | None:
        """Request a swap quote.

        Returns None for a non-success response (no route, bad request).
        Raises QuoteServiceError on transport failure or a malformed body.
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": str(slippage_bps),
            "swapMode": swap_mode,
        }
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.get(self._quote_url, params=params)
        except httpx.HTTPError as e:
            raise QuoteServiceError(f"{type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            logger.debug(
                f"[JUPITER] Quote HTTP {resp.status_code} "
                f"{input_mint[:8]}->{output_mint[:8]}"
            )
            return None

        try:
            data = resp.json()
            quote = JupiterQuote.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise QuoteServiceError(f"Malformed quote response: {e}") from e

        return QuoteResult(
            in_amount=quote.inAmount,
            out_amount=quote.outAmount,
            input_mint=quote.inputMint or input_mint,
            output_mint=quote.outputMint or output_mint,
            slippage_bps=quote.slippageBps or slippage_bps,
            swap_mode=quote.swapMode,
            price_impact_pct=float(quote.priceImpactPct) if quote.priceImpactPct is not None else None,
            raw=data,
        )

    async def get_price(self, mint: str) -> JupiterPrice | None:
        """Fetch USD price for a single token. None when unpriced or on error."""
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.get(self._price_url, params={"ids": mint})
        except httpx.HTTPError as e:
            logger.debug(f"[JUPITER] Price {type(e).__name__} for {mint[:12]}: {e}")
            return None

        if resp.status_code != 200:
            logger.debug(f"[JUPITER] Price HTTP {resp.status_code} for {mint[:12]}")
            return None

        try:
            return _parse_price(resp.json(), mint)
        except (ValueError, InvalidOperation, ValidationError) as e:
            logger.debug(f"[JUPITER] Malformed price payload for {mint[:12]}: {e}")
            return None


def _parse_price(data: dict, mint: str) -> JupiterPrice | None:
    """Parse Jupiter price response for a single mint."""
    if not isinstance(data, dict):
        return None
    token_data = (data.get("data") or {}).get(mint)
    if not isinstance(token_data, dict) or token_data.get("price") is None:
        return None
    return JupiterPrice(id=mint, price=Decimal(str(token_data["price"])))
