from stockfeed.schemas.ticks import (
    FetchStockDataInput,
    BatchFetchInput,
    HistoricalDataQuery,
    ProviderBar,
    TickOut,
    CandlestickPoint,
    ChartDataOut,
    SymbolFetchResult,
    BatchFetchReport,
)

__all__ = [
    "FetchStockDataInput",
    "BatchFetchInput",
    "HistoricalDataQuery",
    "ProviderBar",
    "TickOut",
    "CandlestickPoint",
    "ChartDataOut",
    "SymbolFetchResult",
    "BatchFetchReport",
]
