from typing import List
from fastapi import APIRouter

from stockfeed.services.symbols import list_symbols

router = APIRouter()


@router.get("/", response_model=List[str])
def get_all_symbols():
    return list_symbols()
