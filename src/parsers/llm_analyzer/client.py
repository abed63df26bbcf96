"""LLM price prediction via OpenRouter API.

Sends the serialized analysis and expects back exactly
{"predictions": [{timeframe, prediction, confidence, trend, factors, riskLevel}, ...]}
with no surrounding text. Anything else (HTTP error, timeout, markdown
fences, wrong shape) yields None and the caller uses the formula fallback.
"""

import json
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from src.models.analysis import PredictionRecord
from src.parsers.exceptions import PredictionServiceError
from src.parsers.llm_analyzer.models import LLMPredictionResponse
from src.parsers.rate_limiter import RateLimiter

PROMPT_TEMPLATE = """You are a Solana token analyst. Predict short-term price moves for this token.

ANALYSIS DATA (JSON):
{analysis}

Respond with ONLY this JSON object, no markdown, no commentary:
{{"predictions": [
  {{"timeframe": "1H", "prediction": <percent move, -50..50>, "confidence": <0-100>,
    "trend": "bullish|bearish|neutral", "factors": ["..."], "riskLevel": "low|medium|high"}},
  {{"timeframe": "24H", ...}},
  {{"timeframe": "7D", ...}}
]}}

Rules:
- High risk score (>70) or honeypot flags mean bearish and high riskLevel
- Low volume and small market cap lower confidence
- Longer horizons get lower confidence"""


class PredictionClient:
    """Token price prediction via OpenRouter (Gemini Flash)."""

    BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "google/gemini-2.5-flash-lite",
        max_rps: float = 2.0,
        timeout: float = 30.0,  # LLM responses can be slow
    ) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._model = model
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    async def predict(self, analysis: dict[str, Any]) -> list[PredictionRecord] | None:
        """Ask the model for predictions. None on any failure."""
        prompt = PROMPT_TEMPLATE.format(analysis=json.dumps(analysis, default=str))
        try:
            content = await self._complete(prompt)
        except PredictionServiceError as e:
            logger.warning(f"[LLM] Prediction request failed: {e}")
            return None
        return parse_predictions(content)

    async def _complete(self, prompt: str) -> str:
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.post(
                "/chat/completions",
                json={
                    "model": self._model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": 600,
                    "temperature": 0.2,
                },
            )
        except httpx.HTTPError as e:
            raise PredictionServiceError(f"{type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            raise PredictionServiceError(f"HTTP {resp.status_code}")

        try:
            data = resp.json()
            return data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise PredictionServiceError(f"Unexpected completion payload: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()


def parse_predictions(content: str) -> list[PredictionRecord] | None:
    """Strictly parse the model output. No fence stripping, no extraction."""
    try:
        parsed = LLMPredictionResponse.model_validate_json(content.strip())
    except ValidationError as e:
        logger.warning(f"[LLM] Malformed prediction response: {e.error_count()} errors, content: {content[:200]}")
        return None

    return [
        PredictionRecord(
            timeframe=p.timeframe,
            prediction=p.prediction,
            confidence=round(p.confidence),
            trend=p.trend,
            factors=list(p.factors),
            risk_level=p.riskLevel,
        )
        for p in parsed.predictions
    ]
