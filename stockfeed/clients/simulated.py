import time
from typing import Callable, List, Optional

from stockfeed.clients.base import MarketDataProvider
from stockfeed.core.intervals import interval_seconds
from stockfeed.core.logger import logger
from stockfeed.schemas.ticks import ProviderBar

BASE_PRICES = {
    "AAPL": 150.0,
    "META": 300.0,
}
DEFAULT_BASE_PRICE = 100.0


class SimulatedProvider(MarketDataProvider):
    """
    Deterministic stand-in for a real market data feed.

    Bars are aligned to the interval grid, so two calls within the same bar return the
    same timestamps and prices.
    """

    name = "simulated"

    def __init__(
            self,
            points: int = 10,
            latency: float = 0.0,
            clock: Optional[Callable[[], float]] = None,
    ):
        self.points = points
        self.latency = latency
        self.clock = clock or time.time

    def fetch(self, symbol: str, interval: str, period: str) -> List[ProviderBar]:
        if self.latency > 0:
            time.sleep(self.latency)

        step = interval_seconds(interval)
        last = int(self.clock()) // step * step
        base_price = BASE_PRICES.get(symbol, DEFAULT_BASE_PRICE)

        bars = []
        for i in range(self.points):
            offset = (i % 3) - 1
            open_ = base_price + offset
            close = open_ + (0.5 if i % 2 == 0 else -0.5)
            bars.append(ProviderBar(
                timestamp=last - i * step,
                open=round(open_, 2),
                high=round(max(open_, close) + 0.25, 2),
                low=round(min(open_, close) - 0.25, 2),
                close=round(close, 2),
                volume=100_000 + i * 10_000,
            ))

        bars.reverse()
        logger.debug(f"Simulated {len(bars)} bars for {symbol} {interval} {period}")
        return bars
