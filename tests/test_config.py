"""Tests for settings resolution."""

from config.settings import PUBLIC_MAINNET_RPC, Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_rpc_url_prefers_explicit_helius_url():
    cfg = _settings(helius_rpc_url="https://rpc.example/helius", helius_api_key="k", solana_rpc_url="https://other")
    assert cfg.rpc_url == "https://rpc.example/helius"


def test_rpc_url_built_from_helius_key():
    cfg = _settings(helius_rpc_url="", helius_api_key="abc", solana_rpc_url="")
    assert cfg.rpc_url == "https://mainnet.helius-rpc.com/?api-key=abc"


def test_rpc_url_public_fallback():
    cfg = _settings(helius_rpc_url="", helius_api_key="", solana_rpc_url="")
    assert cfg.rpc_url == PUBLIC_MAINNET_RPC


def test_llm_prediction_needs_key_and_flag():
    assert not _settings(openrouter_api_key="", enable_llm_prediction=True).llm_prediction_enabled
    assert not _settings(openrouter_api_key="k", enable_llm_prediction=False).llm_prediction_enabled
    assert _settings(openrouter_api_key="k", enable_llm_prediction=True).llm_prediction_enabled
