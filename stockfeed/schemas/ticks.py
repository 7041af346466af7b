from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from stockfeed.core.config import settings
from stockfeed.models.enums import Interval, StockSymbol


class FetchStockDataInput(BaseModel):
    symbol: StockSymbol
    interval: Interval = Interval(settings.DEFAULT_INTERVAL)
    period: str = settings.DEFAULT_PERIOD


class BatchFetchInput(BaseModel):
    symbols: List[StockSymbol] = Field(min_length=1, max_length=6)
    interval: Interval = Interval(settings.DEFAULT_INTERVAL)
    period: str = settings.DEFAULT_PERIOD


class HistoricalDataQuery(BaseModel):
    symbol: Optional[StockSymbol] = None
    interval: Interval = Interval(settings.DEFAULT_INTERVAL)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=100, ge=1, le=1000)


class ProviderBar(BaseModel):
    """Raw bar as returned by a market data provider. timestamp is epoch seconds."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: int = Field(ge=0)


class TickOut(BaseModel):
    id: int
    symbol: str
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int
    interval: str
    created_at: datetime


class CandlestickPoint(BaseModel):
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int

    model_config = ConfigDict(from_attributes=True)


class ChartDataOut(BaseModel):
    symbol: str
    interval: str
    points: List[CandlestickPoint]


class SymbolFetchResult(BaseModel):
    status: Literal["ok", "failed"]
    count: int = 0
    error: Optional[str] = None


class BatchFetchReport(BaseModel):
    ticks: List[TickOut]
    results: Dict[str, SymbolFetchResult]
