from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from stockfeed.clients.base import MarketDataProvider
from stockfeed.core.intervals import encode
from stockfeed.core.timeutils import EPOCH
from stockfeed.schemas.ticks import ProviderBar

T = datetime(2024, 1, 1, 12, 0, 0)


def epoch(ts: datetime) -> int:
    return int((ts - EPOCH).total_seconds())


def make_bar(ts: datetime, price: float = 100.0, volume: int = 1000) -> ProviderBar:
    return ProviderBar(
        timestamp=epoch(ts),
        open=price,
        high=price + 1,
        low=price - 1,
        close=price + 0.5,
        volume=volume,
    )


def tick_values(symbol: str, ts: datetime, interval: str = "1m", price: str = "100.0000", volume: int = 1000) -> Dict:
    p = Decimal(price)
    return {
        "symbol": symbol,
        "timestamp": ts,
        "interval": encode(interval),
        "open": p,
        "high": p + 1,
        "low": p - 1,
        "close": p,
        "volume": volume,
    }


class FakeProvider(MarketDataProvider):
    """Returns canned bars per symbol and records every call."""

    name = "fake"

    def __init__(self, bars: Dict[str, List[ProviderBar]] = None, errors: Dict[str, Exception] = None):
        self.bars = bars or {}
        self.errors = errors or {}
        self.calls = []

    def fetch(self, symbol, interval, period):
        self.calls.append((symbol, interval, period))
        if symbol in self.errors:
            raise self.errors[symbol]
        return list(self.bars.get(symbol, []))
