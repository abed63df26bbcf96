"""End-to-end token analysis.

Pipeline for one token:
- validate address (fail fast, no network)
- mint info (required: failure aborts with MintInfoError)
- parallel via asyncio.gather(): holders, metadata, market data,
  honeypot probe, caller wallet balance (all degradable)
- risk assessment
- price history for the requested timeframe + predictions

Only InvalidTokenAddressError and MintInfoError escape analyze();
every other failure ends up as an empty/absent/fallback field.
"""

import asyncio
import random
from collections.abc import Callable
from dataclasses import asdict
from typing import Any, TypeVar

from loguru import logger
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from config.settings import Settings, settings
from src.models.analysis import (
    NOT_CONNECTED,
    AnalysisReport,
    AnalysisResult,
    MarketSnapshot,
    PredictionRecord,
    PriceSeries,
    RiskAssessment,
    SocialLinks,
    TokenBasicInfo,
    TradeabilityVerdict,
)
from src.parsers.birdeye.client import BirdeyeClient
from src.parsers.coingecko.client import CoinGeckoClient
from src.parsers.dexscreener.client import DexScreenerClient
from src.parsers.exceptions import InvalidTokenAddressError, MintInfoError, ProviderError
from src.parsers.holder_analyzer import analyze_holders
from src.parsers.honeypot_detector import probe_tradeability
from src.parsers.jupiter.client import JupiterClient
from src.parsers.llm_analyzer.client import PredictionClient
from src.parsers.market_data import (
    CoinGeckoMarketProvider,
    DexScreenerMarketProvider,
    MarketDataProvider,
    fetch_market_data,
)
from src.parsers.metadata import fetch_token_metadata
from src.parsers.prediction_fallback import fallback_predictions
from src.parsers.price_history import (
    BirdeyeHistoryProvider,
    DexScreenerBackfillProvider,
    JupiterTrendProvider,
    PriceHistoryProvider,
    PriceHistorySynthesizer,
)
from src.parsers.risk_engine import assess_risk
from src.parsers.solana_rpc.client import SolanaRpcClient

T = TypeVar("T")


def validate_address(address: str, *, label: str = "token") -> str:
    """Return the normalized base58 address or raise InvalidTokenAddressError."""
    candidate = (address or "").strip()
    if not candidate:
        raise InvalidTokenAddressError(f"Invalid {label} address: empty")
    try:
        return str(Pubkey.from_string(candidate))
    except ValueError as e:
        raise InvalidTokenAddressError(f"Invalid {label} address: {candidate!r}") from e


def compute_price_and_cap(
    market: MarketSnapshot | None, basic_info: TokenBasicInfo
) -> tuple[float, float]:
    """Current price and market cap shown to the caller.

    Market cap falls back to price x decimal-adjusted supply when the
    provider reports none.
    """
    if market is None:
        return 0.0, 0.0
    if market.market_cap:
        return market.price, market.market_cap
    return market.price, market.price * basic_info.ui_supply


class TokenAnalyzer:
    """Orchestrates one analysis per call; holds clients, never results."""

    def __init__(
        self,
        *,
        rpc: SolanaRpcClient,
        jupiter: JupiterClient,
        dexscreener: DexScreenerClient,
        coingecko: CoinGeckoClient | None = None,
        birdeye: BirdeyeClient | None = None,
        predictor: PredictionClient | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._rpc = rpc
        self._jupiter = jupiter
        self._dexscreener = dexscreener
        self._coingecko = coingecko
        self._birdeye = birdeye
        self._predictor = predictor
        self._rng = rng or random.Random()

        self._market_providers: list[MarketDataProvider] = [DexScreenerMarketProvider(dexscreener)]
        if coingecko is not None:
            self._market_providers.append(CoinGeckoMarketProvider(coingecko))

        history_providers: list[PriceHistoryProvider] = []
        if birdeye is not None:
            history_providers.append(BirdeyeHistoryProvider(birdeye))
        history_providers.append(JupiterTrendProvider(jupiter))
        history_providers.append(DexScreenerBackfillProvider(dexscreener))
        synth_kwargs: dict[str, Any] = {"rng": self._rng}
        if clock is not None:
            synth_kwargs["clock"] = clock
        self._history = PriceHistorySynthesizer(history_providers, **synth_kwargs)

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> "TokenAnalyzer":
        timeout = cfg.http_timeout_sec
        return cls(
            rpc=SolanaRpcClient(cfg.rpc_url, max_rps=cfg.rpc_max_rps, timeout=timeout),
            jupiter=JupiterClient(cfg.jupiter_api_key, max_rps=cfg.jupiter_max_rps, timeout=timeout),
            dexscreener=DexScreenerClient(max_rps=cfg.dexscreener_max_rps, timeout=timeout),
            coingecko=CoinGeckoClient(
                cfg.coingecko_api_key, max_rps=cfg.coingecko_max_rps, timeout=timeout
            ),
            birdeye=(
                BirdeyeClient(cfg.birdeye_api_key, max_rps=cfg.birdeye_max_rps, timeout=timeout)
                if cfg.birdeye_api_key
                else None
            ),
            predictor=(
                PredictionClient(cfg.openrouter_api_key, model=cfg.llm_model)
                if cfg.llm_prediction_enabled
                else None
            ),
        )

    async def close(self) -> None:
        await self._rpc.close()
        await self._jupiter.close()
        await self._dexscreener.close()
        if self._coingecko:
            await self._coingecko.close()
        if self._birdeye:
            await self._birdeye.close()
        if self._predictor:
            await self._predictor.close()

    async def analyze(
        self,
        token_address: str,
        *,
        wallet: str | None = None,
        timeframe: str = "24H",
    ) -> AnalysisReport:
        mint = validate_address(token_address)
        owner = validate_address(wallet, label="wallet") if wallet else None

        try:
            basic_info = await self._rpc.get_mint_info(mint)
        except ProviderError as e:
            raise MintInfoError(f"Failed to fetch token mint info: {e}") from e

        logger.info(
            f"[ANALYZE] {mint[:12]} supply={basic_info.supply} decimals={basic_info.decimals} "
            f"mint_auth={'active' if basic_info.mint_authority_active else 'revoked'} "
            f"freeze_auth={'active' if basic_info.freeze_authority_active else 'revoked'}"
        )

        results = await asyncio.gather(
            analyze_holders(self._rpc, mint, basic_info),
            fetch_token_metadata(self._rpc, mint),
            fetch_market_data(self._market_providers, mint),
            probe_tradeability(self._jupiter, mint),
            self._wallet_balance(owner, mint),
            return_exceptions=True,
        )
        holders = _or_default(results[0], [], "holders")
        metadata, social_links = _or_default(results[1], (None, SocialLinks()), "metadata")
        market = _or_default(results[2], None, "market data")
        verdict = _or_default(
            results[3],
            TradeabilityVerdict(
                is_honeypot=True,
                findings=["❌ Honeypot probe failed", "🚨 Token flagged as potential HONEYPOT"],
            ),
            "honeypot probe",
        )
        balance = _or_default(results[4], 0.0, "wallet balance")

        assessment = assess_risk(basic_info, holders, verdict, market)
        current_price, market_cap = compute_price_and_cap(market, basic_info)

        result = AnalysisResult(
            token_address=mint,
            basic_info=basic_info,
            token_metadata=metadata,
            honeypot_result=verdict,
            holders=holders,
            risk_factors=assessment.factors,
            risk_score=assessment.score,
            risk_level=assessment.level,
            market_data=market,
            current_price=current_price,
            market_cap=market_cap,
            social_links=social_links,
            token_balance=balance,
            wallet_public_key=owner or NOT_CONNECTED,
        )

        price_series = await self._history.build(mint, timeframe)
        predictions, prediction_source = await self._predict(result, assessment)

        logger.info(
            f"[ANALYZE] {mint[:12]} risk={assessment.score} ({assessment.level}) "
            f"honeypot={verdict.is_honeypot} market={market.source if market else 'none'} "
            f"history={price_series.source} predictions={prediction_source}"
        )
        return AnalysisReport(
            result=result,
            price_series=price_series,
            predictions=predictions,
            prediction_source=prediction_source,
        )

    async def price_history(self, token_address: str, timeframe: str) -> PriceSeries:
        """Re-run the history cascade for a timeframe change."""
        return await self._history.build(validate_address(token_address), timeframe)

    async def _wallet_balance(self, owner: str | None, mint: str) -> float:
        if owner is None:
            return 0.0
        try:
            return await self._rpc.get_token_balance(owner, mint)
        except ProviderError as e:
            logger.debug(f"[ANALYZE] Balance lookup failed for {owner[:12]}: {e}")
            return 0.0

    async def _predict(
        self, result: AnalysisResult, assessment: RiskAssessment
    ) -> tuple[list[PredictionRecord], str]:
        market = result.market_data
        if self._predictor is not None:
            try:
                records = await self._predictor.predict(prediction_input(result))
            except Exception as e:
                logger.warning(f"[ANALYZE] Prediction service raised: {e}")
                records = None
            if records:
                return records, "llm"

        return (
            fallback_predictions(
                assessment.score,
                market.volume_24h if market else 0.0,
                market.price_change_24h if market else 0.0,
                result.market_cap,
                rng=self._rng,
            ),
            "fallback",
        )


def prediction_input(result: AnalysisResult) -> dict[str, Any]:
    """Structured analysis data embedded in the prediction prompt."""
    metadata = result.token_metadata
    return {
        "token": result.token_address,
        "name": metadata.name if metadata else None,
        "symbol": metadata.symbol if metadata else None,
        "riskScore": result.risk_score,
        "riskLevel": result.risk_level,
        "riskFactors": [asdict(f) for f in result.risk_factors],
        "isHoneypot": result.honeypot_result.is_honeypot,
        "currentPrice": result.current_price,
        "marketCap": result.market_cap,
        "marketData": asdict(result.market_data) if result.market_data else None,
        "topHolders": [asdict(h) for h in result.holders[:5]],
    }


def _or_default(value: T | BaseException, default: T, label: str) -> T:
    if isinstance(value, BaseException):
        logger.warning(f"[ANALYZE] {label} failed unexpectedly: {value!r}")
        return default
    return value
