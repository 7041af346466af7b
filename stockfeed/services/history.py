from typing import List

from stockfeed.core.intervals import encode
from stockfeed.core.timeutils import to_utc_naive
from stockfeed.repositories import RepositoryFactory
from stockfeed.schemas.ticks import HistoricalDataQuery, TickOut
from stockfeed.services.converters import tick_to_out


def query_history(factory: RepositoryFactory, params: HistoricalDataQuery) -> List[TickOut]:
    """Stored ticks matching the filter, newest first, at most params.limit rows."""
    repo = factory.get_tick_repository()
    rows = repo.query(
        interval=encode(params.interval),
        symbol=params.symbol.value if params.symbol else None,
        start=to_utc_naive(params.start_date),
        end=to_utc_naive(params.end_date),
        limit=params.limit,
    )
    return [tick_to_out(row) for row in rows]
