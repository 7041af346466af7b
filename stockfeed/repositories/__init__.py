from stockfeed.repositories.base import BaseRepository, RepositoryError, RowWriteError, ConstraintViolation
from stockfeed.repositories.ticks import TickRepository
from stockfeed.repositories.factory import RepositoryFactory

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "RowWriteError",
    "ConstraintViolation",
    "TickRepository",
    "RepositoryFactory",
]
