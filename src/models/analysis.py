"""Analysis records: one fresh set per analyze call, never shared."""

from dataclasses import dataclass, field
from typing import Any, Literal

REVOKED = "Revoked"
NOT_CONNECTED = "not connected"

RiskStatus = Literal["safe", "warning", "danger"]
RiskCategory = Literal["security", "whale", "liquidity"]
Trend = Literal["bullish", "bearish", "neutral"]
PredictionRisk = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class TokenBasicInfo:
    """Mint account snapshot."""

    supply: int  # smallest unit
    decimals: int
    mint_authority: str = REVOKED
    freeze_authority: str = REVOKED
    is_initialized: bool = True

    @property
    def mint_authority_active(self) -> bool:
        return self.mint_authority != REVOKED

    @property
    def freeze_authority_active(self) -> bool:
        return self.freeze_authority != REVOKED

    @property
    def ui_supply(self) -> float:
        return self.supply / (10 ** self.decimals)


@dataclass
class TokenMetadata:
    name: str = ""
    symbol: str = ""
    uri: str = ""
    image: str | None = None
    description: str | None = None
    attributes: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class SocialLinks:
    website: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    discord: str | None = None

    @property
    def is_empty(self) -> bool:
        return not any((self.website, self.twitter, self.telegram, self.discord))


@dataclass
class HolderRecord:
    address: str
    amount: float  # decimal-adjusted
    percentage: float  # 0-100 of total supply


@dataclass
class MarketSnapshot:
    price: float  # USD
    market_cap: float | None  # None when the provider reports none
    volume_24h: float
    price_change_24h: float  # percent
    source: str  # provider that supplied it


@dataclass
class QuoteResult:
    """Swap quote: only the numeric fields are interpreted."""

    in_amount: int
    out_amount: int
    input_mint: str
    output_mint: str
    slippage_bps: int
    swap_mode: str = "ExactIn"
    price_impact_pct: float | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class PriceAnalysis:
    buy_unit_price: float
    sell_unit_price: float
    price_impact_percent: float


@dataclass
class TradeabilityVerdict:
    """Honeypot probe outcome. Findings are append-only."""

    is_honeypot: bool = False
    findings: list[str] = field(default_factory=list)
    buy_quote: QuoteResult | None = None
    sell_quote: QuoteResult | None = None
    price_analysis: PriceAnalysis | None = None

    def flag(self, finding: str) -> None:
        self.is_honeypot = True
        self.findings.append(finding)


@dataclass(frozen=True)
class RiskFactor:
    name: str
    score: int
    status: RiskStatus
    description: str
    category: RiskCategory


@dataclass
class RiskAssessment:
    score: int  # clamped to [0, 100]
    level: str  # Low / Medium / High / Critical
    factors: list[RiskFactor]
    raw_score: int  # unclamped sum of rule sub-scores


@dataclass
class PricePoint:
    timestamp: int  # epoch millis
    price: float
    volume: float
    market_cap: float
    date: str


@dataclass
class PriceSeries:
    timeframe: str
    source: str  # birdeye / jupiter / dexscreener / synthetic
    points: list[PricePoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class PredictionRecord:
    timeframe: str
    prediction: float  # percent move
    confidence: int  # 0-100
    trend: Trend
    factors: list[str]
    risk_level: PredictionRisk


@dataclass
class AnalysisResult:
    token_address: str
    basic_info: TokenBasicInfo
    token_metadata: TokenMetadata | None
    honeypot_result: TradeabilityVerdict
    holders: list[HolderRecord]
    risk_factors: list[RiskFactor]
    risk_score: int
    risk_level: str
    market_data: MarketSnapshot | None
    current_price: float
    market_cap: float
    social_links: SocialLinks
    token_balance: float
    wallet_public_key: str = NOT_CONNECTED


@dataclass
class AnalysisReport:
    """Everything one analyze call hands back to the caller."""

    result: AnalysisResult
    price_series: PriceSeries
    predictions: list[PredictionRecord]
    prediction_source: str  # "llm" or "fallback"
