from src.models.analysis import (
    NOT_CONNECTED,
    REVOKED,
    AnalysisReport,
    AnalysisResult,
    HolderRecord,
    MarketSnapshot,
    PriceAnalysis,
    PricePoint,
    PriceSeries,
    PredictionRecord,
    QuoteResult,
    RiskAssessment,
    RiskFactor,
    SocialLinks,
    TokenBasicInfo,
    TokenMetadata,
    TradeabilityVerdict,
)

__all__ = [
    "NOT_CONNECTED",
    "REVOKED",
    "AnalysisReport",
    "AnalysisResult",
    "HolderRecord",
    "MarketSnapshot",
    "PriceAnalysis",
    "PricePoint",
    "PriceSeries",
    "PredictionRecord",
    "QuoteResult",
    "RiskAssessment",
    "RiskFactor",
    "SocialLinks",
    "TokenBasicInfo",
    "TokenMetadata",
    "TradeabilityVerdict",
]
