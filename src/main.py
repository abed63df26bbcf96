"""Command-line entry point: analyze a single token.

Usage:
    python -m src.main <mint> [--wallet ADDRESS] [--timeframe 24H] [--json]
    python -m src.main --serve
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict

from loguru import logger

from config.settings import settings
from src.bot.formatters import format_report
from src.parsers.analyzer import TokenAnalyzer
from src.parsers.exceptions import AnalysisError
from src.utils.logger import setup_logger


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solana token safety analyzer")
    parser.add_argument("token", nargs="?", help="Token mint address")
    parser.add_argument("--wallet", default=None, help="Wallet address to report the balance of")
    parser.add_argument("--timeframe", default="24H", help="Price history timeframe: 1H, 24H, 7D, 30D")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    args = parser.parse_args(argv)
    if not args.serve and not args.token:
        parser.error("token is required unless --serve is given")
    return args


async def run_analysis(token: str, *, wallet: str | None, timeframe: str, as_json: bool) -> int:
    analyzer = TokenAnalyzer.from_settings()
    try:
        report = await analyzer.analyze(token, wallet=wallet, timeframe=timeframe)
    except AnalysisError as e:
        logger.error(f"Analysis failed: {e}")
        print(f"Analysis failed: {e}", file=sys.stderr)
        return 1
    finally:
        await analyzer.close()

    if as_json:
        print(json.dumps(asdict(report), default=str, ensure_ascii=False, indent=2))
    else:
        print(format_report(report))
    return 0


def cli(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    setup_logger(json_logs=settings.json_logs, level=settings.log_level)

    if args.serve:
        from src.api.server import run_api_server

        asyncio.run(run_api_server())
        return

    code = asyncio.run(
        run_analysis(args.token, wallet=args.wallet, timeframe=args.timeframe, as_json=args.json)
    )
    sys.exit(code)


if __name__ == "__main__":
    cli()
