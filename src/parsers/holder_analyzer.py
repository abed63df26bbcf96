"""Top holder ranking by share of total supply."""

from loguru import logger

from src.models.analysis import HolderRecord, TokenBasicInfo
from src.parsers.exceptions import ProviderError
from src.parsers.solana_rpc.client import SolanaRpcClient

MAX_HOLDERS = 20
MIN_HOLDER_PCT = 0.01


async def analyze_holders(
    rpc: SolanaRpcClient,
    mint: str,
    basic_info: TokenBasicInfo | None = None,
) -> list[HolderRecord]:
    """Rank the largest token accounts by share of supply.

    Mint info is fetched when not supplied. Any query failure yields an
    empty list so the concentration rule simply does not fire.
    """
    try:
        if basic_info is None:
            basic_info = await rpc.get_mint_info(mint)
        accounts = await rpc.get_token_largest_accounts(mint)
    except ProviderError as e:
        logger.debug(f"[HOLDERS] Lookup failed for {mint[:12]}: {e}")
        return []

    return rank_holders(
        [(a.address, a.amount) for a in accounts],
        total_supply=basic_info.supply,
        decimals=basic_info.decimals,
    )


def rank_holders(
    accounts: list[tuple[str, int]],
    *,
    total_supply: int,
    decimals: int,
) -> list[HolderRecord]:
    """Turn (address, raw amount) pairs into sorted HolderRecords.

    Amount and supply are both raw units, so the share needs no decimal
    adjustment; only the reported amount does.
    """
    if total_supply <= 0:
        return []

    scale = 10 ** decimals
    holders = []
    for address, raw_amount in accounts[:MAX_HOLDERS]:
        percentage = raw_amount / total_supply * 100
        if percentage < MIN_HOLDER_PCT:
            continue
        holders.append(
            HolderRecord(address=address, amount=raw_amount / scale, percentage=percentage)
        )

    holders.sort(key=lambda h: h.percentage, reverse=True)
    return holders
