from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, DataError
from sqlalchemy.orm import Session

from stockfeed.models import StockTick
from stockfeed.repositories.base import BaseRepository, RepositoryError, RowWriteError, ConstraintViolation
import logging

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_ON_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class TickRepository(BaseRepository[StockTick]):
    """
    Store for StockTick rows keyed by the natural key (symbol, timestamp, interval).

    The interval passed to every method is the storage representation, see
    stockfeed.core.intervals.
    """

    def __init__(self, db: Session):
        super().__init__(db, StockTick)

    def find(self, symbol: str, timestamp: datetime, interval: str) -> Optional[StockTick]:
        """Get the tick stored under a natural key."""
        try:
            return (
                self.db.query(StockTick)
                .filter(
                    StockTick.symbol == symbol,
                    StockTick.timestamp == timestamp,
                    StockTick.interval == interval,
                )
                .one_or_none()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error finding tick {symbol} {interval} {timestamp}: {e}")
            raise RepositoryError("Failed to find tick") from e

    def insert(self, values: Dict[str, Any]) -> StockTick:
        """
        Insert a new tick. id and created_at are assigned by the database.

        Raises ConstraintViolation when the natural key is already taken.
        """
        try:
            return self.create(values)
        except RowWriteError as e:
            if self.find(values["symbol"], values["timestamp"], values["interval"]) is not None:
                raise ConstraintViolation(
                    f"Tick {values['symbol']} {values['interval']} {values['timestamp']} already exists"
                ) from e
            raise

    def update(self, id_: int, obj_in: Dict[str, Any]) -> Optional[StockTick]:
        """Update price/volume fields of a tick. Key fields, id and created_at are immutable."""
        immutable = set(obj_in) - set(StockTick.MUTABLE_FIELDS)
        if immutable:
            raise ValueError(f"Fields cannot be updated: {sorted(immutable)}")
        return super().update(id_, obj_in)

    def upsert(self, values: Dict[str, Any]) -> StockTick:
        """
        Insert the tick, or overwrite price/volume of the row holding its natural key.

        Uses a single INSERT ... ON CONFLICT DO UPDATE where the dialect supports it.
        """
        missing = [f for f in StockTick.NATURAL_KEY + StockTick.MUTABLE_FIELDS if f not in values]
        if missing:
            raise ValueError(f"Missing tick fields: {missing}")

        insert_fn = _ON_CONFLICT_INSERTS.get(self.db.get_bind().dialect.name)
        if insert_fn is None:
            return self._upsert_by_lookup(values)

        stmt = insert_fn(StockTick).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(StockTick.NATURAL_KEY),
            set_={field: getattr(stmt.excluded, field) for field in StockTick.MUTABLE_FIELDS},
        ).returning(StockTick.id)

        try:
            tick_id = self.db.execute(stmt).scalar_one()
            self.db.commit()
        except (IntegrityError, DataError) as e:
            self.db.rollback()
            logger.warning(f"Rejected tick {values['symbol']} {values['timestamp']}: {e}")
            raise RowWriteError("Failed to upsert tick") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error upserting tick {values['symbol']} {values['timestamp']}: {e}")
            raise RepositoryError("Failed to upsert tick") from e

        return self.get(tick_id)

    def _upsert_by_lookup(self, values: Dict[str, Any]) -> StockTick:
        key = [values[f] for f in StockTick.NATURAL_KEY]
        prices = {f: values[f] for f in StockTick.MUTABLE_FIELDS}

        existing = self.find(*key)
        if existing is None:
            try:
                return self.insert(values)
            except ConstraintViolation:
                # a concurrent writer inserted the same key first
                logger.debug(f"Insert lost race for {key}, updating instead")
                existing = self.find(*key)

        return self.update(existing.id, prices)

    def query(
            self,
            interval: str,
            symbol: Optional[str] = None,
            start: Optional[datetime] = None,
            end: Optional[datetime] = None,
            limit: Optional[int] = None,
    ) -> List[StockTick]:
        """
        Get ticks for an interval, optionally filtered by symbol and an inclusive time window.
        Newest first.
        """
        try:
            query = self.db.query(StockTick).filter(StockTick.interval == interval)

            if symbol:
                query = query.filter(StockTick.symbol == symbol)

            if start:
                query = query.filter(StockTick.timestamp >= start)

            if end:
                query = query.filter(StockTick.timestamp <= end)

            query = query.order_by(StockTick.timestamp.desc(), StockTick.id.desc())
            if limit:
                query = query.limit(limit)
            return query.all()

        except SQLAlchemyError as e:
            logger.error(f"Error querying ticks: {e}")
            raise RepositoryError("Failed to query ticks") from e

    def get_latest_by_symbol(self, group_by_interval: bool = False) -> List[StockTick]:
        """
        Get the most recent tick of every symbol, across all intervals unless
        group_by_interval is set. Ties on timestamp go to the highest id.
        """
        try:
            partition = [StockTick.symbol]
            if group_by_interval:
                partition.append(StockTick.interval)

            ranked = (
                self.db.query(
                    StockTick.id,
                    func.row_number().over(
                        partition_by=partition,
                        order_by=(StockTick.timestamp.desc(), StockTick.id.desc()),
                    ).label("rn")
                )
                .subquery()
            )

            return (
                self.db.query(StockTick)
                .join(ranked, StockTick.id == ranked.c.id)
                .filter(ranked.c.rn == 1)
                .order_by(StockTick.timestamp.desc(), StockTick.symbol, StockTick.interval)
                .all()
            )

        except SQLAlchemyError as e:
            logger.error(f"Error getting latest ticks: {e}")
            raise RepositoryError("Failed to get latest ticks") from e
