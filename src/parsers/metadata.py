"""Token metadata and social links via Helius DAS `getAsset`.

Metadata is degradable: any failure returns None and the analysis
continues without a name/symbol/image.
"""

from typing import Any

from loguru import logger

from src.models.analysis import SocialLinks, TokenMetadata
from src.parsers.exceptions import ProviderError
from src.parsers.solana_rpc.client import SolanaRpcClient

# Attribute trait name substrings (lower-case) -> SocialLinks field
_SOCIAL_TRAITS: tuple[tuple[str, str], ...] = (
    ("twitter", "twitter"),
    ("x.com", "twitter"),
    ("telegram", "telegram"),
    ("discord", "discord"),
    ("website", "website"),
    ("web", "website"),
)


async def fetch_token_metadata(
    rpc: SolanaRpcClient,
    token_address: str,
) -> tuple[TokenMetadata | None, SocialLinks]:
    """Fetch metadata and derive social links from it."""
    try:
        asset = await rpc.get_asset(token_address)
    except ProviderError as e:
        logger.debug(f"[METADATA] getAsset failed for {token_address[:12]}: {e}")
        return None, SocialLinks()

    if asset is None:
        return None, SocialLinks()

    metadata = parse_asset_metadata(asset)
    links = (asset.get("content") or {}).get("links") or {}
    return metadata, extract_social_links(metadata, links)


def parse_asset_metadata(asset: dict[str, Any]) -> TokenMetadata | None:
    content = asset.get("content") or {}
    raw = content.get("metadata")
    if not isinstance(raw, dict):
        return None

    links = content.get("links") or {}
    attributes = raw.get("attributes")
    return TokenMetadata(
        name=raw.get("name") or "",
        symbol=raw.get("symbol") or "",
        uri=content.get("json_uri") or "",
        image=links.get("image"),
        description=raw.get("description"),
        attributes=[a for a in attributes if isinstance(a, dict)] if isinstance(attributes, list) else [],
    )


def extract_social_links(
    metadata: TokenMetadata | None,
    asset_links: dict[str, Any] | None = None,
) -> SocialLinks:
    """Match attribute trait names (case-insensitive substring) to socials.

    The first matching attribute wins per link type. `external_url` from
    the asset links is used as a website fallback.
    """
    found: dict[str, str] = {}
    for attr in metadata.attributes if metadata else []:
        trait = str(attr.get("trait_type", "")).lower()
        value = attr.get("value")
        if not trait or not isinstance(value, str) or not value.strip():
            continue
        for needle, link_field in _SOCIAL_TRAITS:
            if needle in trait:
                found.setdefault(link_field, value.strip())
                break

    external_url = (asset_links or {}).get("external_url")
    if "website" not in found and isinstance(external_url, str) and external_url:
        found["website"] = external_url

    return SocialLinks(**found)
