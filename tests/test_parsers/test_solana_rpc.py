"""Tests for the Solana JSON-RPC client and mint decoding."""

import base64
import json
import struct

import httpx
import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.models.analysis import REVOKED
from src.parsers.exceptions import SolanaRpcError
from src.parsers.solana_rpc.client import (
    NULL_ADDRESS,
    TOKEN_PROGRAM_ID,
    SolanaRpcClient,
    decode_mint,
)
from tests.helpers import AUTHORITY, MINT, WALLET


def _build_mint(
    *,
    mint_authority: str | None = None,
    freeze_authority: str | None = None,
    supply: int = 1_000_000_000,
    decimals: int = 6,
) -> bytes:
    """Standard SPL Token mint account (82 bytes)."""
    data = bytearray(82)
    if mint_authority:
        struct.pack_into("<I", data, 0, 1)
        data[4:36] = bytes(Pubkey.from_string(mint_authority))
    struct.pack_into("<Q", data, 36, supply)
    data[44] = decimals
    data[45] = 1
    if freeze_authority:
        struct.pack_into("<I", data, 46, 1)
        data[50:82] = bytes(Pubkey.from_string(freeze_authority))
    return bytes(data)


def _rpc_with(handler) -> SolanaRpcClient:
    client = SolanaRpcClient("https://rpc.test", max_rps=0)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


def _result(result) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})


def test_decode_revoked_mint():
    info = decode_mint(_build_mint(supply=5_000_000_000, decimals=9))
    assert info.supply == 5_000_000_000
    assert info.decimals == 9
    assert info.is_initialized
    assert info.mint_authority == REVOKED
    assert info.freeze_authority == REVOKED
    assert not info.mint_authority_active
    assert info.ui_supply == pytest.approx(5.0)


def test_decode_active_authorities():
    info = decode_mint(_build_mint(mint_authority=AUTHORITY, freeze_authority=WALLET))
    assert info.mint_authority == AUTHORITY
    assert info.freeze_authority == WALLET
    assert info.mint_authority_active
    assert info.freeze_authority_active


def test_system_program_authority_counts_as_revoked():
    info = decode_mint(_build_mint(mint_authority=NULL_ADDRESS))
    assert info.mint_authority == REVOKED


def test_decode_token2022_mint_with_extensions():
    raw = _build_mint(mint_authority=AUTHORITY) + bytes(83) + b"\x01" + bytes(40)
    assert decode_mint(raw).mint_authority == AUTHORITY


def test_decode_short_data():
    with pytest.raises(SolanaRpcError):
        decode_mint(b"\x00" * 40)


@pytest.mark.asyncio
async def test_get_mint_info():
    encoded = base64.b64encode(_build_mint(freeze_authority=AUTHORITY)).decode()

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert body["method"] == "getAccountInfo"
        assert body["params"][0] == MINT
        return _result({"value": {"owner": TOKEN_PROGRAM_ID, "data": [encoded, "base64"]}})

    rpc = _rpc_with(handler)
    info = await rpc.get_mint_info(MINT)
    await rpc.close()

    assert info.freeze_authority == AUTHORITY
    assert info.mint_authority == REVOKED


@pytest.mark.asyncio
async def test_get_mint_info_rejects_non_token_account():
    encoded = base64.b64encode(_build_mint()).decode()
    rpc = _rpc_with(lambda r: _result({"value": {"owner": NULL_ADDRESS, "data": [encoded, "base64"]}}))
    with pytest.raises(SolanaRpcError, match="not a token mint"):
        await rpc.get_mint_info(MINT)


@pytest.mark.asyncio
async def test_get_mint_info_missing_account():
    rpc = _rpc_with(lambda r: _result({"value": None}))
    with pytest.raises(SolanaRpcError, match="Account not found"):
        await rpc.get_mint_info(MINT)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "result",
    [{"value": ["x"]}, ["unexpected"], {"value": {"owner": TOKEN_PROGRAM_ID, "data": "AAAA"}}],
)
async def test_get_mint_info_malformed_result(result):
    """Odd payload shapes surface as SolanaRpcError, never AttributeError."""
    rpc = _rpc_with(lambda r: _result(result))
    with pytest.raises(SolanaRpcError):
        await rpc.get_mint_info(MINT)


@pytest.mark.asyncio
async def test_rpc_error_payload_raises():
    rpc = _rpc_with(
        lambda r: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "Invalid param"}})
    )
    with pytest.raises(SolanaRpcError, match="Invalid param"):
        await rpc.get_token_largest_accounts(MINT)


@pytest.mark.asyncio
async def test_http_failure_raises():
    rpc = _rpc_with(lambda r: httpx.Response(429, text="slow down"))
    with pytest.raises(SolanaRpcError, match="HTTP 429"):
        await rpc.get_token_largest_accounts(MINT)


@pytest.mark.asyncio
async def test_get_token_largest_accounts():
    rpc = _rpc_with(
        lambda r: _result(
            {"value": [
                {"address": "acc1", "amount": "750000", "decimals": 6, "uiAmount": 0.75},
                {"address": "acc2", "amount": "250000", "decimals": 6, "uiAmount": 0.25},
            ]}
        )
    )
    accounts = await rpc.get_token_largest_accounts(MINT)
    assert [(a.address, a.amount) for a in accounts] == [("acc1", 750_000), ("acc2", 250_000)]


@pytest.mark.asyncio
async def test_get_token_balance_sums_accounts():
    def account(ui_amount):
        return {"account": {"data": {"parsed": {"info": {"tokenAmount": {"uiAmount": ui_amount}}}}}}

    rpc = _rpc_with(lambda r: _result({"value": [account(1.5), account(2.25), account(None)]}))
    assert await rpc.get_token_balance(WALLET, MINT) == pytest.approx(3.75)


@pytest.mark.asyncio
async def test_get_asset_unknown_returns_none():
    rpc = _rpc_with(lambda r: _result(None))
    assert await rpc.get_asset(MINT) is None
