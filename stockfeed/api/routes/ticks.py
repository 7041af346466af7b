from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from stockfeed.api.dependencies import get_factory, get_provider
from stockfeed.clients.base import MarketDataProvider, ProviderError
from stockfeed.core.config import settings
from stockfeed.core.logger import logger
from stockfeed.models.enums import Interval, StockSymbol
from stockfeed.repositories.factory import RepositoryFactory
from stockfeed.schemas.ticks import (
    BatchFetchInput,
    BatchFetchReport,
    ChartDataOut,
    FetchStockDataInput,
    HistoricalDataQuery,
    TickOut,
)
from stockfeed.services.chart import get_chart_data
from stockfeed.services.history import query_history
from stockfeed.services.ingestion import batch_fetch_report, fetch_and_store
from stockfeed.services.latest_prices import get_latest_prices

router = APIRouter()


def history_query(
        symbol: Optional[StockSymbol] = None,
        interval: Interval = Interval(settings.DEFAULT_INTERVAL),
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = Query(default=100, ge=1, le=1000),
) -> HistoricalDataQuery:
    return HistoricalDataQuery(
        symbol=symbol,
        interval=interval,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )


@router.post("/fetch", response_model=List[TickOut])
def fetch_stock_data(
        params: FetchStockDataInput,
        factory: RepositoryFactory = Depends(get_factory),
        provider: MarketDataProvider = Depends(get_provider),
):
    """Fetch bars for one symbol from the provider and store them."""
    try:
        return fetch_and_store(factory, provider, params)
    except ProviderError as e:
        logger.warning(f"fetch_stock_data failed for {params.symbol.value}: {e}")
        raise HTTPException(502, detail=str(e))
    except Exception as e:
        logger.error(f"fetch_stock_data failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to fetch stock data")


@router.post("/batch", response_model=List[TickOut])
def batch_fetch_stocks(
        params: BatchFetchInput,
        factory: RepositoryFactory = Depends(get_factory),
        provider: MarketDataProvider = Depends(get_provider),
):
    """Fetch and store up to six symbols, one after another."""
    try:
        return batch_fetch_report(factory, provider, params).ticks
    except Exception as e:
        logger.error(f"batch_fetch_stocks failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to batch fetch stocks")


@router.post("/batch/report", response_model=BatchFetchReport)
def batch_fetch_stocks_report(
        params: BatchFetchInput,
        factory: RepositoryFactory = Depends(get_factory),
        provider: MarketDataProvider = Depends(get_provider),
):
    """Same as /batch, with a per-symbol status map."""
    try:
        return batch_fetch_report(factory, provider, params)
    except Exception as e:
        logger.error(f"batch_fetch_stocks_report failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to batch fetch stocks")


@router.get("/history", response_model=List[TickOut])
def get_historical_data(
        params: HistoricalDataQuery = Depends(history_query),
        factory: RepositoryFactory = Depends(get_factory),
):
    try:
        return query_history(factory, params)
    except Exception as e:
        logger.error(f"get_historical_data failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to get historical data")


@router.get("/chart", response_model=ChartDataOut)
def get_chart(
        params: HistoricalDataQuery = Depends(history_query),
        factory: RepositoryFactory = Depends(get_factory),
        provider: MarketDataProvider = Depends(get_provider),
):
    try:
        return get_chart_data(factory, provider, params)
    except Exception as e:
        logger.error(f"get_chart failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to get chart data")


@router.get("/latest", response_model=List[TickOut])
def get_latest(
        refresh: bool = False,
        group_by_interval: bool = False,
        factory: RepositoryFactory = Depends(get_factory),
        provider: MarketDataProvider = Depends(get_provider),
):
    """Most recent tick for every stored symbol, optionally refreshed from the provider first."""
    try:
        return get_latest_prices(factory, provider, refresh=refresh, group_by_interval=group_by_interval)
    except Exception as e:
        logger.error(f"get_latest failed: {e}", exc_info=True)
        raise HTTPException(500, detail="Failed to get latest prices")
