from sqlalchemy import Column, Integer, String, DateTime, Numeric, BigInteger, Index, UniqueConstraint
from stockfeed.core.timeutils import utc_now
from stockfeed.core.db import Base


class StockTick(Base):
    __tablename__ = "stock_ticks"
    __table_args__ = (
        UniqueConstraint("symbol", "timestamp", "interval", name="uq_stock_ticks_natural_key"),
        Index("stock_ticks_symbol_timestamp_idx", "symbol", "timestamp"),
        Index("stock_ticks_symbol_interval_idx", "symbol", "interval"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(10), nullable=False)
    # naive UTC, as is created_at
    timestamp = Column(DateTime, nullable=False, index=True)
    interval = Column(String(16), nullable=False)
    open = Column(Numeric(12, 4), nullable=False)
    high = Column(Numeric(12, 4), nullable=False)
    low = Column(Numeric(12, 4), nullable=False)
    close = Column(Numeric(12, 4), nullable=False)
    volume = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    NATURAL_KEY = ("symbol", "timestamp", "interval")
    MUTABLE_FIELDS = ("open", "high", "low", "close", "volume")

    def __repr__(self) -> str:
        return f"<StockTick {self.symbol} {self.interval} {self.timestamp}>"
