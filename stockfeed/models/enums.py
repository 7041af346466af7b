from enum import Enum


class StockSymbol(str, Enum):
    META = "META"
    AAPL = "AAPL"
    AMZN = "AMZN"
    GOOG = "GOOG"
    MSFT = "MSFT"
    NVDA = "NVDA"

    @classmethod
    def values(cls):
        return [member.value for member in cls]


class Interval(str, Enum):
    M1 = "1m"
    M2 = "2m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    M60 = "60m"
    M90 = "90m"
    H1 = "1h"
    D1 = "1d"
    D5 = "5d"
    WK1 = "1wk"
    MO1 = "1mo"
    MO3 = "3mo"
