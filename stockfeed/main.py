# stockfeed/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from stockfeed.api import api_router
from stockfeed.clients import build_provider
from stockfeed.clients.base import MarketDataProvider
from stockfeed.core.config import settings
from stockfeed.core.db import create_db_engine, init_db, make_session_factory
from stockfeed.core.logger import logger


def create_app(
        session_factory: Optional[sessionmaker] = None,
        provider: Optional[MarketDataProvider] = None,
) -> FastAPI:
    """
    Build the API. Without arguments the database and provider come from settings at
    startup; tests pass their own.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if session_factory is None:
            engine = create_db_engine()
            init_db(engine)
            app.state.session_factory = make_session_factory(engine)
            logger.info("Database initialized")
        if provider is None:
            app.state.provider = build_provider()
        logger.info(f"Stock data API ready, provider: {app.state.provider.name}")
        yield
        if engine is not None:
            engine.dispose()
            logger.info("Database connection closed")

    app = FastAPI(lifespan=lifespan, title="Stock Ticks API", version="1.0.0")
    app.state.session_factory = session_factory
    app.state.provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True
    )

    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {"message": "Stock Ticks API is running", "version": "1.0.0"}

    @app.get("/healthcheck")
    async def healthcheck():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
