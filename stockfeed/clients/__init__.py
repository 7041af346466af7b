from stockfeed.clients.base import MarketDataProvider, ProviderError
from stockfeed.clients.simulated import SimulatedProvider
from stockfeed.core.config import settings


def build_provider(name: str = None) -> MarketDataProvider:
    """Create the market data provider selected in settings."""
    name = (name or settings.MARKET_DATA_PROVIDER).lower()
    if name == "simulated":
        return SimulatedProvider(latency=settings.SIMULATED_PROVIDER_LATENCY)
    if name == "yfinance":
        from stockfeed.clients.yfinance_client import YFinanceProvider
        return YFinanceProvider(timeout=settings.PROVIDER_TIMEOUT)
    raise ValueError(f"Unknown market data provider '{name}'. Available: simulated, yfinance")


__all__ = ["MarketDataProvider", "ProviderError", "SimulatedProvider", "build_provider"]
