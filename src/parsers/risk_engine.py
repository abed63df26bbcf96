"""Composite risk score from mint flags, holders, probe results and market data.

Each rule is a pure function returning a RiskFactor (or None when its
input is missing). assess_risk folds them in fixed order, clamps the sum
to [0, 100] and derives the level from the clamped value.

Scoring breakdown (max per rule):
- Mint authority active: 30
- Freeze authority active: 20
- Top holder concentration: 40
- Liquidity depth (buy quote output): 35
- Price impact of the probe round trip: 25
- Market cap / 24h volume: 20
"""

from collections.abc import Callable

from src.models.analysis import (
    HolderRecord,
    MarketSnapshot,
    RiskAssessment,
    RiskFactor,
    TokenBasicInfo,
    TradeabilityVerdict,
)

MAX_SCORE = 100


def mint_authority_factor(basic_info: TokenBasicInfo) -> RiskFactor:
    if basic_info.mint_authority_active:
        return RiskFactor(
            name="Mint Authority",
            score=30,
            status="danger",
            description="Mint authority is still active - new tokens can be created",
            category="security",
        )
    return RiskFactor(
        name="Mint Authority",
        score=0,
        status="safe",
        description="Mint authority has been revoked",
        category="security",
    )


def freeze_authority_factor(basic_info: TokenBasicInfo) -> RiskFactor:
    if basic_info.freeze_authority_active:
        return RiskFactor(
            name="Freeze Authority",
            score=20,
            status="warning",
            description="Freeze authority is active - accounts can be frozen",
            category="security",
        )
    return RiskFactor(
        name="Freeze Authority",
        score=0,
        status="safe",
        description="Freeze authority has been revoked",
        category="security",
    )


def holder_concentration_factor(holders: list[HolderRecord]) -> RiskFactor | None:
    if not holders:
        return None

    top = holders[0].percentage
    if top > 50:
        score, status, desc = 40, "danger", f"Top holder owns {top:.1f}% - Extreme centralization risk"
    elif top > 30:
        score, status, desc = 25, "danger", f"Top holder owns {top:.1f}% - High centralization risk"
    elif top > 20:
        score, status, desc = 15, "warning", f"Top holder owns {top:.1f}% - Moderate centralization risk"
    elif top > 10:
        score, status, desc = 5, "warning", f"Top holder owns {top:.1f}% - Slight centralization risk"
    else:
        score, status, desc = 0, "safe", f"Well distributed ownership - Top holder: {top:.1f}%"

    return RiskFactor(
        name="Token Distribution", score=score, status=status, description=desc, category="whale"
    )


def liquidity_factor(verdict: TradeabilityVerdict) -> RiskFactor | None:
    if verdict.buy_quote is None or verdict.sell_quote is None:
        return None

    out_amount = verdict.buy_quote.out_amount
    if out_amount < 100_000:
        score, status, desc = 35, "danger", "Very low liquidity - High slippage risk"
    elif out_amount < 1_000_000:
        score, status, desc = 20, "warning", "Low liquidity - Significant slippage expected"
    elif out_amount < 10_000_000:
        score, status, desc = 10, "warning", "Moderate liquidity - Some slippage expected"
    else:
        score, status, desc = 0, "safe", "Good liquidity available"

    return RiskFactor(
        name="Liquidity", score=score, status=status, description=desc, category="liquidity"
    )


def price_impact_factor(verdict: TradeabilityVerdict) -> RiskFactor | None:
    if verdict.price_analysis is None:
        return None

    impact = verdict.price_analysis.price_impact_percent
    magnitude = abs(impact)
    if magnitude > 10:
        score, status, desc = 25, "danger", f"Very high price impact: {impact:.2f}%"
    elif magnitude > 5:
        score, status, desc = 15, "warning", f"High price impact: {impact:.2f}%"
    elif magnitude > 2:
        score, status, desc = 5, "warning", f"Moderate price impact: {impact:.2f}%"
    else:
        score, status, desc = 0, "safe", f"Low price impact: {impact:.2f}%"

    return RiskFactor(
        name="Price Impact", score=score, status=status, description=desc, category="liquidity"
    )


def market_metrics_factor(market: MarketSnapshot | None) -> RiskFactor | None:
    if market is None:
        return None

    cap = market.market_cap
    # Cap check short-circuits the volume check; an unreported cap is skipped
    if cap is not None and cap < 100_000:
        score, status, desc = 20, "danger", f"Very small market cap: ${cap:,.0f}"
    elif market.volume_24h < 10_000:
        score, status, desc = 15, "warning", f"Low 24h trading volume: ${market.volume_24h:,.0f}"
    else:
        cap_text = f"${cap:,.0f}" if cap is not None else "unknown"
        score, status, desc = 0, "safe", (
            f"Healthy market: cap {cap_text}, 24h volume ${market.volume_24h:,.0f}"
        )

    return RiskFactor(
        name="Market Metrics", score=score, status=status, description=desc, category="liquidity"
    )


def risk_level(score: int) -> str:
    """Qualitative level for a clamped aggregate score."""
    if score > 70:
        return "Critical"
    if score > 50:
        return "High"
    if score > 30:
        return "Medium"
    return "Low"


def assess_risk(
    basic_info: TokenBasicInfo,
    holders: list[HolderRecord],
    verdict: TradeabilityVerdict,
    market: MarketSnapshot | None = None,
) -> RiskAssessment:
    """Apply every rule in fixed order and aggregate."""
    rules: list[Callable[[], RiskFactor | None]] = [
        lambda: mint_authority_factor(basic_info),
        lambda: freeze_authority_factor(basic_info),
        lambda: holder_concentration_factor(holders),
        lambda: liquidity_factor(verdict),
        lambda: price_impact_factor(verdict),
        lambda: market_metrics_factor(market),
    ]

    factors = [f for f in (rule() for rule in rules) if f is not None]
    raw_score = sum(f.score for f in factors)
    score = int(max(0, min(MAX_SCORE, raw_score)))

    return RiskAssessment(
        score=score,
        level=risk_level(score),
        factors=factors,
        raw_score=raw_score,
    )
