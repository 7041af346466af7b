from typing import List

import pandas as pd
import yfinance as yf

from stockfeed.clients.base import MarketDataProvider, ProviderError
from stockfeed.core.logger import logger
from stockfeed.schemas.ticks import ProviderBar


class YFinanceProvider(MarketDataProvider):
    """Fetch historical bars via Yahoo Finance."""

    name = "yfinance"

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def fetch(self, symbol: str, interval: str, period: str) -> List[ProviderBar]:
        try:
            data = yf.Ticker(symbol).history(
                period=period,
                interval=interval,
                prepost=True,
                timeout=self.timeout,
                raise_errors=True,
            )
        except Exception as e:
            logger.error(f"Yahoo Finance request failed for {symbol} {interval} {period}: {e}")
            raise ProviderError(f"Failed to fetch {symbol} from Yahoo Finance") from e

        if data is None or data.empty:
            logger.warning(f"No data from Yahoo Finance for {symbol} {interval} {period}")
            return []

        bars = frame_to_bars(data)
        logger.info(f"Fetched {len(bars)} rows of price data for {symbol}")
        return bars


def frame_to_bars(data: pd.DataFrame) -> List[ProviderBar]:
    """Convert a yfinance history frame (DatetimeIndex, OHLCV columns) to bars, oldest first."""
    columns = ["Open", "High", "Low", "Close", "Volume"]
    missing = [c for c in columns if c not in data.columns]
    if missing:
        raise ProviderError(f"Unexpected Yahoo Finance columns, missing {missing}")

    frame = data[columns].dropna()
    dropped = len(data) - len(frame)
    if dropped:
        logger.debug(f"Dropped {dropped} incomplete rows")

    index = pd.DatetimeIndex(frame.index)
    if index.tz is None:
        index = index.tz_localize("UTC")

    bars = []
    for ts, (_, row) in zip(index, frame.iterrows()):
        try:
            bar = ProviderBar(
                timestamp=int(ts.timestamp()),
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
                volume=int(row["Volume"]),
            )
        except (ValueError, OverflowError) as e:
            logger.warning(f"Dropped invalid row at {ts}: {e}")
            continue
        bars.append(bar)
    bars.sort(key=lambda bar: bar.timestamp)
    return bars
