"""Token analysis endpoints: full report and per-timeframe price history."""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from config.settings import settings
from src.api.dependencies import get_analyzer, limiter
from src.parsers.analyzer import TokenAnalyzer
from src.parsers.exceptions import InvalidTokenAddressError, MintInfoError

router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])


@router.get("/{address}")
@limiter.limit(settings.api_rate_limit)
async def analyze_token(
    request: Request,
    address: str,
    wallet: str | None = Query(None, max_length=64),
    timeframe: str = Query("24H", max_length=8),
    analyzer: TokenAnalyzer = Depends(get_analyzer),
) -> dict[str, Any]:
    """Run the full analysis for one token."""
    try:
        report = await analyzer.analyze(address, wallet=wallet, timeframe=timeframe)
    except InvalidTokenAddressError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except MintInfoError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return asdict(report)


@router.get("/{address}/history")
@limiter.limit(settings.api_rate_limit)
async def price_history(
    request: Request,
    address: str,
    timeframe: str = Query("24H", max_length=8),
    analyzer: TokenAnalyzer = Depends(get_analyzer),
) -> dict[str, Any]:
    """Price series for a timeframe; the provider cascade re-runs every call."""
    try:
        series = await analyzer.price_history(address, timeframe)
    except InvalidTokenAddressError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return asdict(series)
