import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.dexscreener.models import DexScreenerPair
from src.parsers.exceptions import DexScreenerError
from src.parsers.rate_limiter import RateLimiter

BASE_URL = "https://api.dexscreener.com"


class DexScreenerClient:
    """Async REST client for DexScreener public API (no auth required)."""

    def __init__(self, max_rps: float = 4.0, timeout: float = 10.0) -> None:
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._rate_limiter = RateLimiter(max_rps)

    async def get_token_pairs(self, token_address: str) -> list[DexScreenerPair]:
        """Get all pairs for a token on Solana."""
        await self._rate_limiter.acquire()
        try:
            response = await self._client.get(f"/token-pairs/v1/solana/{token_address}")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise DexScreenerError(f"HTTP {e.response.status_code} for {token_address[:12]}") from e
        except httpx.HTTPError as e:
            raise DexScreenerError(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise DexScreenerError("Invalid JSON from pairs endpoint") from e

        if isinstance(data, list):
            raw_pairs = data
        else:
            raw_pairs = data.get("pairs", data.get("pair", [])) if isinstance(data, dict) else []
            if not isinstance(raw_pairs, list):
                raw_pairs = [raw_pairs] if raw_pairs else []

        pairs = []
        for raw in raw_pairs:
            try:
                pairs.append(DexScreenerPair.model_validate(raw))
            except ValidationError as e:
                logger.debug(f"[DEXSCREENER] Skipping malformed pair: {e}")
        return pairs

    async def close(self) -> None:
        await self._client.aclose()
