"""Quote-based honeypot detection.

Simulates a round trip through the swap-quote service:
BUY (1 SOL -> token), SELL (90% of bought tokens -> SOL), then compares
effective unit prices. Any stage failure short-circuits the rest and
marks the token unsafe; transport errors are treated the same way.
"""

from typing import Protocol

import httpx
from loguru import logger

from src.models.analysis import PriceAnalysis, QuoteResult, TradeabilityVerdict
from src.parsers.exceptions import ProviderError
from src.parsers.jupiter.client import LAMPORTS_PER_SOL, WSOL_MINT

REFERENCE_BUY_LAMPORTS = 1 * LAMPORTS_PER_SOL
PROBE_SLIPPAGE_BPS = 500
PROBE_SWAP_MODE = "ExactIn"
SELL_FRACTION = 0.9
HONEYPOT_IMPACT_PCT = 50.0
RISKY_IMPACT_PCT = 10.0


class QuoteSource(Protocol):
    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        *,
        slippage_bps: int,
        swap_mode: str = "ExactIn",
    ) -> QuoteResult | None: ...


async def probe_tradeability(quotes: QuoteSource, token_address: str) -> TradeabilityVerdict:
    """Run the BUY -> SELL -> IMPACT probe for a token."""
    verdict = TradeabilityVerdict()

    try:
        await _run_stages(quotes, token_address, verdict)
    except (ProviderError, httpx.HTTPError) as e:
        logger.debug(f"[HONEYPOT] Quote service error for {token_address[:12]}: {e}")
        verdict.flag("❌ Could not reach the swap quote service")

    if verdict.is_honeypot:
        verdict.findings.append("🚨 Token flagged as potential HONEYPOT")
        logger.info(f"[HONEYPOT] {token_address[:12]} flagged: {verdict.findings[:-1]}")
    else:
        verdict.findings.append("🎉 Token passed basic honeypot tests")
    return verdict


async def _run_stages(
    quotes: QuoteSource, token_address: str, verdict: TradeabilityVerdict
) -> None:
    # Stage BUY
    buy = await quotes.get_quote(
        WSOL_MINT,
        token_address,
        REFERENCE_BUY_LAMPORTS,
        slippage_bps=PROBE_SLIPPAGE_BPS,
        swap_mode=PROBE_SWAP_MODE,
    )
    if buy is None:
        verdict.flag("❌ Failed to get BUY quote")
        return
    verdict.buy_quote = buy
    if buy.out_amount <= 0:
        verdict.flag("❌ BUY quote returned zero tokens")
        return
    verdict.findings.append("✅ BUY quote successful")

    # Stage SELL
    sell_amount = int(buy.out_amount * SELL_FRACTION)
    sell = await quotes.get_quote(
        token_address,
        WSOL_MINT,
        sell_amount,
        slippage_bps=PROBE_SLIPPAGE_BPS,
        swap_mode=PROBE_SWAP_MODE,
    )
    if sell is None:
        verdict.flag("❌ Failed to get SELL quote")
        return
    verdict.sell_quote = sell
    if sell.out_amount <= 0 or sell.in_amount <= 0:
        verdict.flag("❌ SELL quote returned zero SOL")
        return
    verdict.findings.append("✅ SELL quote successful")

    # Stage IMPACT
    analysis = compute_price_analysis(buy, sell)
    verdict.price_analysis = analysis
    impact = abs(analysis.price_impact_percent)
    if impact > HONEYPOT_IMPACT_PCT:
        verdict.flag(f"🚨 Dangerous price impact: {analysis.price_impact_percent:.2f}%")
    elif impact > RISKY_IMPACT_PCT:
        verdict.findings.append(f"⚠️ Risky price impact: {analysis.price_impact_percent:.2f}%")
    else:
        verdict.findings.append(f"✅ Acceptable price impact: {analysis.price_impact_percent:.2f}%")


def compute_price_analysis(buy: QuoteResult, sell: QuoteResult) -> PriceAnalysis:
    """Compare effective unit prices of the two quotes.

    Buy side is in/out, sell side is out/in. Do not normalize the
    orientation without product sign-off; risk thresholds are tuned to it.
    """
    buy_unit_price = buy.in_amount / buy.out_amount
    sell_unit_price = sell.out_amount / sell.in_amount
    if buy_unit_price == 0:
        impact = 0.0
    else:
        impact = (buy_unit_price - sell_unit_price) / buy_unit_price * 100
    return PriceAnalysis(
        buy_unit_price=buy_unit_price,
        sell_unit_price=sell_unit_price,
        price_impact_percent=impact,
    )
