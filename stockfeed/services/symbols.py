from typing import List

from stockfeed.models.enums import StockSymbol


def list_symbols() -> List[str]:
    return StockSymbol.values()
