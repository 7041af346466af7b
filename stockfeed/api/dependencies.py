from fastapi import Depends, Request
from sqlalchemy.orm import Session

from stockfeed.clients.base import MarketDataProvider
from stockfeed.core.db import get_db
from stockfeed.repositories.factory import RepositoryFactory


def get_factory(db: Session = Depends(get_db)) -> RepositoryFactory:
    return RepositoryFactory(db)


def get_provider(request: Request) -> MarketDataProvider:
    return request.app.state.provider
