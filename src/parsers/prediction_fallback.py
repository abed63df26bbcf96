"""Deterministic-formula price predictions used when the LLM is unavailable."""

import random

from src.models.analysis import PredictionRecord

# (label, hours)
HORIZONS: tuple[tuple[str, int], ...] = (("1H", 1), ("24H", 24), ("7D", 168))

GENERIC_FACTORS = ["Market sentiment", "Technical indicators"]


def _clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def predict_horizon(
    hours: int,
    label: str,
    *,
    risk_score: float,
    volume_24h: float,
    price_change_24h: float,
    market_cap: float,
    rng: random.Random,
) -> PredictionRecord:
    risk_factor = (100 - risk_score) / 100
    volume_factor = min(volume_24h / 1_000_000, 2)
    trend_factor = price_change_24h / 100
    time_factor = hours / 24
    noise = rng.uniform(-time_factor * 5, time_factor * 5)

    prediction = _clamp(
        -50, 50, risk_factor * volume_factor * trend_factor * time_factor * 100 + noise
    )

    confidence = _clamp(
        20,
        95,
        (
            (100 - risk_score)
            + min(volume_24h / 100_000, 100)
            + max(20, 100 - hours * 2)
        ) / 3,
    )

    if risk_score > 70:
        trend = "bearish"
    elif price_change_24h > 5:
        trend = "bullish"
    elif price_change_24h < -5:
        trend = "bearish"
    else:
        trend = "neutral"

    if risk_score > 70:
        risk_level = "high"
    elif risk_score > 40:
        risk_level = "medium"
    else:
        risk_level = "low"

    factors = []
    if risk_score > 60:
        factors.append("High risk score")
    if volume_24h < 100_000:
        factors.append("Low trading volume")
    if market_cap < 1_000_000:
        factors.append("Small market cap")
    if hours > 24:
        factors.append("Extended time horizon")

    return PredictionRecord(
        timeframe=label,
        prediction=round(prediction, 2),
        confidence=round(confidence),
        trend=trend,
        factors=factors or list(GENERIC_FACTORS),
        risk_level=risk_level,
    )


def fallback_predictions(
    risk_score: float,
    volume_24h: float,
    price_change_24h: float,
    market_cap: float,
    *,
    rng: random.Random | None = None,
) -> list[PredictionRecord]:
    """Short / medium / long horizon predictions (1h, 24h, 7d)."""
    rng = rng or random.Random()
    return [
        predict_horizon(
            hours,
            label,
            risk_score=risk_score,
            volume_24h=volume_24h,
            price_change_24h=price_change_24h,
            market_cap=market_cap,
            rng=rng,
        )
        for label, hours in HORIZONS
    ]
