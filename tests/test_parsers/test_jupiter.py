"""Tests for the Jupiter quote and price client."""

from decimal import Decimal

import httpx
import pytest

from src.parsers.exceptions import QuoteServiceError
from src.parsers.jupiter.client import WSOL_MINT, JupiterClient
from tests.helpers import MINT


def _jupiter_with(handler) -> JupiterClient:
    client = JupiterClient(max_rps=0)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


@pytest.mark.asyncio
async def test_get_quote_parses_amounts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "inputMint": WSOL_MINT,
                "outputMint": MINT,
                "inAmount": "1000000000",
                "outAmount": "123456789",
                "slippageBps": 500,
                "swapMode": "ExactIn",
                "priceImpactPct": "0.0123",
                "routePlan": [{"swapInfo": {"label": "Raydium"}}],
            },
        )

    jupiter = _jupiter_with(handler)
    quote = await jupiter.get_quote(WSOL_MINT, MINT, 1_000_000_000, slippage_bps=500)
    await jupiter.close()

    assert quote.in_amount == 1_000_000_000
    assert quote.out_amount == 123_456_789
    assert quote.price_impact_pct == pytest.approx(0.0123)
    assert "routePlan" in quote.raw
    assert seen["amount"] == "1000000000"
    assert seen["slippageBps"] == "500"
    assert seen["swapMode"] == "ExactIn"


@pytest.mark.asyncio
async def test_get_quote_no_route_returns_none():
    jupiter = _jupiter_with(
        lambda r: httpx.Response(400, json={"error": "Could not find any route", "errorCode": "COULD_NOT_FIND_ANY_ROUTE"})
    )
    assert await jupiter.get_quote(WSOL_MINT, MINT, 1_000_000_000, slippage_bps=500) is None


@pytest.mark.asyncio
async def test_get_quote_malformed_body_raises():
    jupiter = _jupiter_with(lambda r: httpx.Response(200, json={"inAmount": "lots"}))
    with pytest.raises(QuoteServiceError):
        await jupiter.get_quote(WSOL_MINT, MINT, 1_000_000_000, slippage_bps=500)


@pytest.mark.asyncio
async def test_get_quote_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    jupiter = _jupiter_with(handler)
    with pytest.raises(QuoteServiceError):
        await jupiter.get_quote(WSOL_MINT, MINT, 1_000_000_000, slippage_bps=500)


@pytest.mark.asyncio
async def test_get_price():
    jupiter = _jupiter_with(
        lambda r: httpx.Response(200, json={"data": {MINT: {"id": MINT, "price": "0.99985"}}})
    )
    price = await jupiter.get_price(MINT)
    assert price.price == Decimal("0.99985")


@pytest.mark.asyncio
async def test_get_price_unpriced_token():
    jupiter = _jupiter_with(lambda r: httpx.Response(200, json={"data": {MINT: None}}))
    assert await jupiter.get_price(MINT) is None


@pytest.mark.asyncio
async def test_get_price_http_error_returns_none():
    jupiter = _jupiter_with(lambda r: httpx.Response(500))
    assert await jupiter.get_price(MINT) is None
