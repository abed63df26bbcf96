from pydantic_settings import BaseSettings, SettingsConfigDict

PUBLIC_MAINNET_RPC = "https://api.mainnet-beta.solana.com"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Helius (Solana RPC + DAS metadata)
    helius_api_key: str = ""
    helius_rpc_url: str = ""

    # Solana RPC (fallback if helius is not configured)
    solana_rpc_url: str = ""

    # Jupiter (swap quotes + price index, free tier 1 RPS)
    jupiter_api_key: str = ""
    jupiter_max_rps: float = 1.0

    # DexScreener (pairs, no auth)
    dexscreener_max_rps: float = 4.0

    # Birdeye (historical price series, disabled without key)
    birdeye_api_key: str = ""
    birdeye_max_rps: float = 10.0

    # CoinGecko (contract-address price index, demo key optional)
    coingecko_api_key: str = ""
    coingecko_max_rps: float = 0.5

    # LLM price prediction via OpenRouter
    openrouter_api_key: str = ""
    enable_llm_prediction: bool = True
    llm_model: str = "google/gemini-2.5-flash-lite"

    # HTTP
    http_timeout_sec: float = 10.0
    rpc_max_rps: float = 10.0

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_rate_limit: str = "20/minute"
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    @property
    def rpc_url(self) -> str:
        """Resolve the on-chain query endpoint (Helius first, public RPC last)."""
        if self.helius_rpc_url:
            return self.helius_rpc_url
        if self.helius_api_key:
            return f"https://mainnet.helius-rpc.com/?api-key={self.helius_api_key}"
        return self.solana_rpc_url or PUBLIC_MAINNET_RPC

    @property
    def llm_prediction_enabled(self) -> bool:
        return self.enable_llm_prediction and bool(self.openrouter_api_key)


settings = Settings()
