"""Shared test fixtures."""

import random

import pytest

from src.models.analysis import TokenBasicInfo
from tests.helpers import AUTHORITY


@pytest.fixture
def revoked_info() -> TokenBasicInfo:
    """1M tokens at 6 decimals, both authorities revoked."""
    return TokenBasicInfo(supply=1_000_000_000_000, decimals=6)


@pytest.fixture
def active_info() -> TokenBasicInfo:
    return TokenBasicInfo(
        supply=1_000_000_000_000,
        decimals=6,
        mint_authority=AUTHORITY,
        freeze_authority=AUTHORITY,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
