"""Tests for the analysis HTTP API."""

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import limiter
from src.parsers.analyzer import validate_address
from src.parsers.exceptions import MintInfoError
from tests.helpers import MINT, make_report


class FakeAnalyzer:
    def __init__(self, error: Exception | None = None):
        self._error = error
        self.calls: list[tuple] = []

    async def analyze(self, token_address, *, wallet=None, timeframe="24H"):
        self.calls.append((token_address, wallet, timeframe))
        validate_address(token_address)
        if self._error:
            raise self._error
        return make_report()

    async def price_history(self, token_address, timeframe):
        validate_address(token_address)
        return make_report().price_series

    async def close(self):
        pass


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


def _client(analyzer: FakeAnalyzer) -> TestClient:
    return TestClient(create_app(analyzer=analyzer))


def test_health():
    with _client(FakeAnalyzer()) as client:
        resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_analysis_report():
    analyzer = FakeAnalyzer()
    with _client(analyzer) as client:
        resp = client.get(f"/api/v1/analysis/{MINT}", params={"timeframe": "7D"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["risk_score"] == 55
    assert body["result"]["risk_level"] == "High"
    assert body["prediction_source"] == "fallback"
    assert analyzer.calls == [(MINT, None, "7D")]


def test_invalid_address_is_400():
    with _client(FakeAnalyzer()) as client:
        resp = client.get("/api/v1/analysis/not-a-mint")
    assert resp.status_code == 400
    assert "Invalid token address" in resp.json()["detail"]


def test_mint_info_failure_is_502():
    analyzer = FakeAnalyzer(error=MintInfoError("Failed to fetch token mint info: Account not found"))
    with _client(analyzer) as client:
        resp = client.get(f"/api/v1/analysis/{MINT}")
    assert resp.status_code == 502


def test_price_history_endpoint():
    with _client(FakeAnalyzer()) as client:
        resp = client.get(f"/api/v1/analysis/{MINT}/history", params={"timeframe": "24H"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["source"] == "jupiter"
    assert len(body["points"]) == 1
