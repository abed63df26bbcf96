"""Expected JSON shape of the LLM prediction response."""

from typing import Literal

from pydantic import BaseModel, Field


class LLMPrediction(BaseModel):
    timeframe: str
    prediction: float = Field(ge=-50, le=50)
    confidence: float = Field(ge=0, le=100)
    trend: Literal["bullish", "bearish", "neutral"]
    factors: list[str]
    riskLevel: Literal["low", "medium", "high"]

    model_config = {"extra": "forbid"}


class LLMPredictionResponse(BaseModel):
    predictions: list[LLMPrediction] = Field(min_length=1)

    model_config = {"extra": "forbid"}
