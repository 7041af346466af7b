import time
from typing import Callable, List, Optional, Sequence

from stockfeed.clients.base import MarketDataProvider, ProviderError
from stockfeed.core.config import settings
from stockfeed.core.intervals import encode
from stockfeed.core.logger import logger
from stockfeed.repositories import RepositoryFactory, TickRepository, RowWriteError
from stockfeed.schemas.ticks import (
    BatchFetchInput,
    BatchFetchReport,
    FetchStockDataInput,
    ProviderBar,
    SymbolFetchResult,
    TickOut,
)
from stockfeed.services.converters import bar_to_row, tick_to_out


def upsert_ticks(
        repo: TickRepository,
        symbol: str,
        interval: str,
        bars: Sequence[ProviderBar],
) -> List[TickOut]:
    """
    Merge provider bars for one symbol/interval into the store, one at a time.

    A bar that cannot be written is logged and skipped. RepositoryError aborts the
    remaining bars and propagates.
    """
    storage_interval = encode(interval)
    stored = []

    for bar in bars:
        try:
            tick = repo.upsert(bar_to_row(symbol, storage_interval, bar))
        except (RowWriteError, ValueError, ArithmeticError) as e:
            logger.warning(f"Skipping {symbol} {interval} bar at {bar.timestamp}: {e}")
            continue
        stored.append(tick_to_out(tick))

    return stored


def fetch_and_store(
        factory: RepositoryFactory,
        provider: MarketDataProvider,
        params: FetchStockDataInput,
) -> List[TickOut]:
    """Fetch bars for one symbol and upsert them. Raises ProviderError when nothing comes back."""
    symbol = params.symbol.value
    interval = params.interval.value

    bars = provider.fetch(symbol, interval, params.period)
    if not bars:
        raise ProviderError(f"No data returned for {symbol} {interval} {params.period}")

    stored = upsert_ticks(factory.get_tick_repository(), symbol, interval, bars)
    logger.info(f"Stored {len(stored)}/{len(bars)} {interval} ticks for {symbol}")
    return stored


def batch_fetch_report(
        factory: RepositoryFactory,
        provider: MarketDataProvider,
        params: BatchFetchInput,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
) -> BatchFetchReport:
    """
    Fetch and store several symbols one after another, pausing `delay` seconds between
    symbols. Provider failures are recorded per symbol and do not stop the batch.
    """
    delay = settings.BATCH_FETCH_DELAY if delay is None else delay
    ticks: List[TickOut] = []
    results = {}

    for i, symbol in enumerate(params.symbols):
        if i and delay > 0:
            sleep(delay)

        try:
            stored = fetch_and_store(
                factory,
                provider,
                FetchStockDataInput(symbol=symbol, interval=params.interval, period=params.period),
            )
        except ProviderError as e:
            logger.error(f"Batch fetch skipped {symbol.value}: {e}")
            results[symbol.value] = SymbolFetchResult(status="failed", error=str(e))
            continue

        ticks.extend(stored)
        results[symbol.value] = SymbolFetchResult(status="ok", count=len(stored))

    failed = [s for s, r in results.items() if r.status == "failed"]
    logger.info(f"Batch fetch stored {len(ticks)} ticks, failed symbols: {failed or 'none'}")
    return BatchFetchReport(ticks=ticks, results=results)


def batch_fetch_and_store(
        factory: RepositoryFactory,
        provider: MarketDataProvider,
        params: BatchFetchInput,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
) -> List[TickOut]:
    return batch_fetch_report(factory, provider, params, delay=delay, sleep=sleep).ticks
