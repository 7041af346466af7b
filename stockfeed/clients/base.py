from abc import ABC, abstractmethod
from typing import List

from stockfeed.schemas.ticks import ProviderBar


class ProviderError(Exception):
    """Market data source unreachable, failing or returning nothing."""
    pass


class MarketDataProvider(ABC):
    """
    A source of OHLCV bars.

    fetch() returns bars in chronological order, timestamps in epoch seconds. An empty
    list means the source had no data for the request; transport or parsing failures
    are raised as ProviderError.
    """

    name: str = "provider"

    @abstractmethod
    def fetch(self, symbol: str, interval: str, period: str) -> List[ProviderBar]:
        raise NotImplementedError
