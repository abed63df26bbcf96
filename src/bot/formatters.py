"""Format analysis results as short human-readable text."""

from src.models.analysis import AnalysisReport, AnalysisResult

_LEVEL_EMOJI = {"Low": "🟢", "Medium": "🟡", "High": "🟠", "Critical": "🔴"}

SHARE_TEXT_LIMIT = 280


def _token_label(result: AnalysisResult) -> str:
    meta = result.token_metadata
    if meta and meta.symbol:
        return f"${meta.symbol}"
    return f"{result.token_address[:4]}...{result.token_address[-4:]}"


def format_analysis_summary(result: AnalysisResult) -> str:
    """One-paragraph shareable summary, capped at SHARE_TEXT_LIMIT chars."""
    emoji = _LEVEL_EMOJI.get(result.risk_level, "⚪")
    verdict = "🚨 HONEYPOT" if result.honeypot_result.is_honeypot else "✅ Tradeable"
    parts = [
        f"{_token_label(result)} safety check",
        f"{emoji} Risk: {result.risk_level} ({result.risk_score}/100)",
        verdict,
    ]
    if result.holders:
        parts.append(f"Top holder: {result.holders[0].percentage:.1f}%")
    if result.market_cap > 0:
        parts.append(f"MCap: ${result.market_cap:,.0f}")

    text = " | ".join(parts)
    if len(text) > SHARE_TEXT_LIMIT:
        text = text[: SHARE_TEXT_LIMIT - 1] + "…"
    return text


def format_report(report: AnalysisReport) -> str:
    """Multi-line console report."""
    result = report.result
    lines = [format_analysis_summary(result), ""]

    lines.append("Risk factors:")
    for factor in result.risk_factors:
        lines.append(f"  [{factor.status:<7}] {factor.name} (+{factor.score}): {factor.description}")

    lines.append("")
    lines.append("Honeypot probe:")
    lines.extend(f"  {finding}" for finding in result.honeypot_result.findings)

    if result.market_data:
        m = result.market_data
        lines.append("")
        lines.append(
            f"Market ({m.source}): price=${m.price:.10g} volume24h=${m.volume_24h:,.0f} "
            f"change24h={m.price_change_24h:+.2f}%"
        )

    series = report.price_series
    if series.points:
        lines.append("")
        lines.append(
            f"Price history {series.timeframe} ({series.source}): {len(series.points)} points, "
            f"{series.points[0].date} -> {series.points[-1].date}"
        )

    lines.append("")
    lines.append(f"Predictions ({report.prediction_source}):")
    for p in report.predictions:
        lines.append(
            f"  {p.timeframe:>3}: {p.prediction:+.2f}% {p.trend} "
            f"(confidence {p.confidence}%, risk {p.risk_level})"
        )

    lines.append("")
    lines.append(f"Wallet: {result.wallet_public_key} balance={result.token_balance:g}")
    return "\n".join(lines)
