from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from stockfeed.core.config import settings

Base = declarative_base()


def create_db_engine(url: Optional[str] = None, **kwargs) -> Engine:
    """Build an engine for the given URL, falling back to the configured database."""
    kwargs.setdefault("echo", settings.SQL_ECHO)
    return create_engine(url or settings.DATABASE_URL, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables registered on Base."""
    from stockfeed import models  # noqa: F401  registers the mappers

    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
