from stockfeed.models.enums import StockSymbol, Interval
from stockfeed.models.tick import StockTick

__all__ = ["StockSymbol", "Interval", "StockTick"]
