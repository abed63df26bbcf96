"""Solana JSON-RPC client: mint info, holders, balances and DAS metadata.

Works against any RPC node; getAsset needs a DAS-capable endpoint (Helius).
Single attempt per call: failures raise SolanaRpcError and the caller
decides whether the dependency is required or degradable.
"""

import base64
import struct
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from src.models.analysis import REVOKED, TokenBasicInfo
from src.parsers.exceptions import SolanaRpcError
from src.parsers.rate_limiter import RateLimiter
from src.parsers.solana_rpc.models import RpcTokenAccount

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC2DMyxgRuMuQ2yrz8"

# SPL Token mint layout: 82 bytes
# [0:36]   mintAuthorityOption (4) + mintAuthority (32)
# [36:44]  supply (u64)
# [44:45]  decimals (u8)
# [45:46]  isInitialized (bool)
# [46:82]  freezeAuthorityOption (4) + freezeAuthority (32)
SPL_MINT_SIZE = 82

# System program address, used by some launchpads as a "renounced" authority
NULL_ADDRESS = "11111111111111111111111111111111"


class SolanaRpcClient:
    """Async JSON-RPC client for the on-chain query service."""

    def __init__(self, rpc_url: str, max_rps: float = 10.0, timeout: float = 10.0) -> None:
        self._rpc_url = rpc_url
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            timeout=timeout, headers={"Content-Type": "application/json"}
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _call(self, method: str, params: list[Any] | dict[str, Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise SolanaRpcError(f"{method}: {type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            raise SolanaRpcError(f"{method}: HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise SolanaRpcError(f"{method}: invalid JSON response") from e

        error = data.get("error") if isinstance(data, dict) else None
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise SolanaRpcError(f"{method}: {message}")
        if not isinstance(data, dict) or "result" not in data:
            raise SolanaRpcError(f"{method}: missing result")
        return data["result"]

    async def get_mint_info(self, mint: str) -> TokenBasicInfo:
        """Fetch and decode the mint account."""
        result = await self._call(
            "getAccountInfo",
            [mint, {"encoding": "base64", "commitment": "confirmed"}],
        )
        if result is not None and not isinstance(result, dict):
            raise SolanaRpcError("Malformed getAccountInfo result")
        account = (result or {}).get("value")
        if not account:
            raise SolanaRpcError("Account not found")
        if not isinstance(account, dict):
            raise SolanaRpcError("Malformed getAccountInfo result")

        owner = account.get("owner")
        if owner not in (TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID):
            raise SolanaRpcError(f"Account is not a token mint (owner {owner})")

        raw_data = account.get("data") or []
        if not isinstance(raw_data, list) or not raw_data:
            raise SolanaRpcError("No account data")

        try:
            raw_bytes = base64.b64decode(raw_data[0])
        except (ValueError, TypeError) as e:
            raise SolanaRpcError(f"Undecodable account data: {e}") from e
        return decode_mint(raw_bytes)

    async def get_token_largest_accounts(self, mint: str) -> list[RpcTokenAccount]:
        """Largest token accounts for a mint (the RPC caps this at 20)."""
        result = await self._call("getTokenLargestAccounts", [mint])
        try:
            return [
                RpcTokenAccount.model_validate(item)
                for item in (result or {}).get("value") or []
            ]
        except ValidationError as e:
            raise SolanaRpcError(f"getTokenLargestAccounts: malformed value: {e}") from e

    async def get_token_balance(self, owner: str, mint: str) -> float:
        """Sum of the owner's decimal-adjusted balances for a mint."""
        result = await self._call(
            "getTokenAccountsByOwner",
            [owner, {"mint": mint}, {"encoding": "jsonParsed"}],
        )
        total = 0.0
        for item in (result or {}).get("value") or []:
            token_amount = (
                item.get("account", {})
                .get("data", {})
                .get("parsed", {})
                .get("info", {})
                .get("tokenAmount", {})
            )
            ui_amount = token_amount.get("uiAmount")
            if ui_amount is not None:
                total += float(ui_amount)
        return total

    async def get_asset(self, asset_id: str) -> dict[str, Any] | None:
        """DAS getAsset. Returns None when the asset is unknown."""
        result = await self._call("getAsset", {"id": asset_id})
        if not isinstance(result, dict):
            logger.debug(f"[RPC] getAsset returned no asset for {asset_id[:12]}")
            return None
        return result


def decode_mint(raw: bytes) -> TokenBasicInfo:
    """Decode raw SPL Token / Token2022 mint bytes.

    Authorities that are unset (or set to the system program) are REVOKED.
    """
    if len(raw) < SPL_MINT_SIZE:
        raise SolanaRpcError(f"Mint data too short: {len(raw)} bytes")

    mint_auth_option = struct.unpack_from("<I", raw, 0)[0]
    supply = struct.unpack_from("<Q", raw, 36)[0]
    decimals = raw[44]
    is_initialized = raw[45] == 1
    freeze_auth_option = struct.unpack_from("<I", raw, 46)[0]

    return TokenBasicInfo(
        supply=supply,
        decimals=decimals,
        mint_authority=_authority(mint_auth_option, raw[4:36]),
        freeze_authority=_authority(freeze_auth_option, raw[50:82]),
        is_initialized=is_initialized,
    )


def _authority(option: int, key_bytes: bytes) -> str:
    if option != 1:
        return REVOKED
    address = str(Pubkey(key_bytes))
    return REVOKED if address == NULL_ADDRESS else address
