from typing import List

from stockfeed.clients.base import MarketDataProvider, ProviderError
from stockfeed.core.config import settings
from stockfeed.core.intervals import decode, encode
from stockfeed.core.logger import logger
from stockfeed.repositories import RepositoryFactory
from stockfeed.schemas.ticks import ChartDataOut, HistoricalDataQuery, TickOut
from stockfeed.services.converters import tick_to_point
from stockfeed.services.history import query_history
from stockfeed.services.ingestion import upsert_ticks


def get_chart_data(
        factory: RepositoryFactory,
        provider: MarketDataProvider,
        params: HistoricalDataQuery,
) -> ChartDataOut:
    """
    OHLCV points for charting, in query order.

    When a single symbol has no stored rows, one provider request is made, the result is
    stored and the query is run again.
    """
    ticks = query_history(factory, params)

    if not ticks and params.symbol:
        ticks = _fetch_on_miss(factory, provider, params)

    if params.symbol:
        symbol = params.symbol.value
    elif ticks:
        symbol = ticks[0].symbol
    else:
        # TODO: return symbol=None once chart clients stop requiring a label
        symbol = settings.DEFAULT_CHART_SYMBOL

    return ChartDataOut(
        symbol=symbol,
        interval=decode(encode(params.interval)),
        points=[tick_to_point(tick) for tick in ticks],
    )


def _fetch_on_miss(
        factory: RepositoryFactory,
        provider: MarketDataProvider,
        params: HistoricalDataQuery,
) -> List[TickOut]:
    symbol = params.symbol.value
    interval = params.interval.value
    logger.info(f"No local data for {symbol} {interval}, fetching from {provider.name}")

    try:
        bars = provider.fetch(symbol, interval, settings.CHART_FALLBACK_PERIOD)
    except ProviderError as e:
        logger.error(f"Chart fallback fetch failed for {symbol}: {e}")
        return []

    if not bars:
        logger.warning(f"Provider returned no data for {symbol} {interval}")
        return []

    upsert_ticks(factory.get_tick_repository(), symbol, interval, bars)
    return query_history(factory, params)
