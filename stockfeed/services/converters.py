import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

from stockfeed.core.intervals import decode
from stockfeed.core.timeutils import epoch_to_utc
from stockfeed.models import StockTick
from stockfeed.schemas.ticks import ProviderBar, TickOut, CandlestickPoint

PRICE_QUANTUM = Decimal("0.0001")


def to_price(value: float) -> Decimal:
    """Float price -> fixed precision decimal with 4 fractional digits."""
    if value is None or not math.isfinite(value):
        raise ValueError(f"Invalid price: {value}")
    return Decimal(str(value)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


def bar_to_row(symbol: str, storage_interval: str, bar: ProviderBar) -> Dict[str, Any]:
    return {
        "symbol": symbol,
        "timestamp": epoch_to_utc(bar.timestamp),
        "interval": storage_interval,
        "open": to_price(bar.open),
        "high": to_price(bar.high),
        "low": to_price(bar.low),
        "close": to_price(bar.close),
        "volume": bar.volume,
    }


def tick_to_out(tick: StockTick) -> TickOut:
    return TickOut(
        id=tick.id,
        symbol=tick.symbol,
        timestamp=tick.timestamp,
        open=float(tick.open),
        high=float(tick.high),
        low=float(tick.low),
        close=float(tick.close),
        volume=int(tick.volume),
        interval=decode(tick.interval),
        created_at=tick.created_at,
    )


def tick_to_point(tick: TickOut) -> CandlestickPoint:
    return CandlestickPoint.model_validate(tick)
