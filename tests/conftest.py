import os

os.environ.setdefault("LOG_TO_FILE", "False")
os.environ.setdefault("BATCH_FETCH_DELAY", "0")
os.environ.setdefault("MARKET_DATA_PROVIDER", "simulated")

import pytest
from sqlalchemy.pool import StaticPool

from stockfeed.core.db import create_db_engine, init_db, make_session_factory
from stockfeed.repositories import RepositoryFactory

from helpers import FakeProvider


@pytest.fixture
def engine():
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def factory(db):
    return RepositoryFactory(db)


@pytest.fixture
def repo(factory):
    return factory.get_tick_repository()


@pytest.fixture
def provider():
    return FakeProvider()
