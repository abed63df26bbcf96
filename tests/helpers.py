"""Fake service clients and builders shared by the test modules."""

from src.models.analysis import (
    AnalysisReport,
    AnalysisResult,
    HolderRecord,
    MarketSnapshot,
    PredictionRecord,
    PricePoint,
    PriceSeries,
    QuoteResult,
    RiskFactor,
    SocialLinks,
    TokenBasicInfo,
    TokenMetadata,
    TradeabilityVerdict,
)
from src.parsers.jupiter.client import WSOL_MINT

# Well-formed base58 addresses
MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
AUTHORITY = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"


def make_quote(in_amount: int, out_amount: int, *, buy: bool = True) -> QuoteResult:
    return QuoteResult(
        in_amount=in_amount,
        out_amount=out_amount,
        input_mint=WSOL_MINT if buy else MINT,
        output_mint=MINT if buy else WSOL_MINT,
        slippage_bps=500,
    )


class FakeQuotes:
    """Swap-quote stub: returns queued responses, records every request."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls: list[tuple[str, str, int]] = []

    async def get_quote(self, input_mint, output_mint, amount, *, slippage_bps, swap_mode="ExactIn"):
        self.calls.append((input_mint, output_mint, amount))
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def make_report(*, symbol: str = "TEST", honeypot: bool = False) -> AnalysisReport:
    """A finished report with every section populated."""
    verdict = TradeabilityVerdict(findings=["✅ BUY quote successful"])
    if honeypot:
        verdict.flag("❌ Failed to get SELL quote")
    result = AnalysisResult(
        token_address=MINT,
        basic_info=TokenBasicInfo(supply=1_000_000_000_000, decimals=6, mint_authority=AUTHORITY),
        token_metadata=TokenMetadata(name="Test Coin", symbol=symbol),
        honeypot_result=verdict,
        holders=[HolderRecord(address="whale", amount=420_000.0, percentage=42.0)],
        risk_factors=[
            RiskFactor("Mint Authority", 30, "danger", "Mint authority is still active", "security"),
            RiskFactor("Token Distribution", 25, "danger", "Top holder owns 42.0%", "whale"),
        ],
        risk_score=55,
        risk_level="High",
        market_data=MarketSnapshot(0.0021, 2_100_000, 80_000, 8.5, "dexscreener"),
        current_price=0.0021,
        market_cap=2_100_000,
        social_links=SocialLinks(twitter="https://x.com/test"),
        token_balance=0.0,
    )
    return AnalysisReport(
        result=result,
        price_series=PriceSeries(
            "24H", "jupiter", [PricePoint(1_750_000_000_000, 0.002, 1000.0, 2_000_000.0, "10:00")]
        ),
        predictions=[PredictionRecord("1H", 0.42, 55, "bullish", ["Market sentiment"], "medium")],
        prediction_source="fallback",
    )
