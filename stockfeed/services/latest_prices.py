import time
from typing import Callable, List, Optional

from stockfeed.clients.base import MarketDataProvider, ProviderError
from stockfeed.core.config import settings
from stockfeed.core.logger import logger
from stockfeed.models.enums import StockSymbol
from stockfeed.repositories import RepositoryFactory
from stockfeed.schemas.ticks import TickOut
from stockfeed.services.converters import tick_to_out
from stockfeed.services.ingestion import upsert_ticks


def get_latest_prices(
        factory: RepositoryFactory,
        provider: Optional[MarketDataProvider] = None,
        refresh: bool = False,
        group_by_interval: bool = False,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
) -> List[TickOut]:
    """
    Most recent stored tick per symbol, newest first.

    By default the latest tick is picked across all intervals; with group_by_interval
    there is one row per (symbol, interval). With refresh, the newest bar of every known
    symbol is pulled from the provider and stored first.
    """
    repo = factory.get_tick_repository()

    if refresh:
        if provider is None:
            raise ValueError("refresh requires a market data provider")
        refresh_latest(factory, provider, delay=delay, sleep=sleep)

    return [tick_to_out(tick) for tick in repo.get_latest_by_symbol(group_by_interval=group_by_interval)]


def refresh_latest(
        factory: RepositoryFactory,
        provider: MarketDataProvider,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Store the newest provider bar for every symbol. Returns the number of stored ticks."""
    delay = settings.BATCH_FETCH_DELAY if delay is None else delay
    repo = factory.get_tick_repository()
    interval = settings.DEFAULT_INTERVAL
    stored = 0

    for i, symbol in enumerate(StockSymbol):
        if i and delay > 0:
            sleep(delay)

        try:
            bars = provider.fetch(symbol.value, interval, settings.DEFAULT_PERIOD)
        except ProviderError as e:
            logger.error(f"Failed to fetch latest price for {symbol.value}: {e}")
            continue

        if not bars:
            logger.warning(f"No latest price data for {symbol.value}")
            continue

        stored += len(upsert_ticks(repo, symbol.value, interval, bars[-1:]))

    logger.info(f"Refreshed latest prices, stored {stored} ticks")
    return stored
