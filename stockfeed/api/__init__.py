from fastapi import APIRouter

from .routes.ticks import router as ticks_router
from .routes.symbols import router as symbols_router

api_router = APIRouter()
api_router.include_router(ticks_router, prefix="/ticks", tags=["Ticks"])
api_router.include_router(symbols_router, prefix="/symbols", tags=["Symbols"])
