class AnalysisError(Exception):
    """Aborts an analysis. The message is shown to the caller as-is."""


class InvalidTokenAddressError(AnalysisError):
    pass


class MintInfoError(AnalysisError):
    pass


class ProviderError(Exception):
    """Transport or protocol failure inside a provider client."""


class SolanaRpcError(ProviderError):
    pass


class QuoteServiceError(ProviderError):
    pass


class BirdeyeApiError(ProviderError):
    pass


class PredictionServiceError(ProviderError):
    pass


class DexScreenerError(ProviderError):
    pass


class CoinGeckoError(ProviderError):
    pass
