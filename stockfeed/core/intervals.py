"""
Interval codec.

Logical interval tokens ("1m", "1h", "1wk", ...) are what callers send and receive.
Inside the ``stock_ticks`` table the interval column holds a normalized, PostgreSQL
interval style representation ("00:01:00", "1 day", "1 mon", ...).

"60m" and "1h" describe the same granularity and share one storage form; decoding that
form always yields "1h".
"""
import logging
from typing import Dict, Union

from stockfeed.models.enums import Interval

logger = logging.getLogger(__name__)

_STORAGE_FORMS: Dict[Interval, str] = {
    Interval.M1: "00:01:00",
    Interval.M2: "00:02:00",
    Interval.M5: "00:05:00",
    Interval.M15: "00:15:00",
    Interval.M30: "00:30:00",
    Interval.M60: "01:00:00",
    Interval.M90: "01:30:00",
    Interval.H1: "01:00:00",
    Interval.D1: "1 day",
    Interval.D5: "5 days",
    Interval.WK1: "7 days",
    Interval.MO1: "1 mon",
    Interval.MO3: "3 mons",
}

_SECONDS: Dict[Interval, int] = {
    Interval.M1: 60,
    Interval.M2: 120,
    Interval.M5: 300,
    Interval.M15: 900,
    Interval.M30: 1800,
    Interval.M60: 3600,
    Interval.M90: 5400,
    Interval.H1: 3600,
    Interval.D1: 86400,
    Interval.D5: 5 * 86400,
    Interval.WK1: 7 * 86400,
    Interval.MO1: 30 * 86400,
    Interval.MO3: 90 * 86400,
}

CANONICAL_TOKENS: Dict[str, Interval] = {
    "01:00:00": Interval.H1,
}

# Long spellings PostgreSQL may render for month intervals.
_STORAGE_ALIASES: Dict[str, Interval] = {
    "1 month": Interval.MO1,
    "3 months": Interval.MO3,
}

for _table_name, _table in (("storage", _STORAGE_FORMS), ("seconds", _SECONDS)):
    _missing = set(Interval) - set(_table)
    if _missing:
        raise RuntimeError(
            f"Interval {_table_name} mapping is missing: {sorted(m.value for m in _missing)}"
        )


def _build_reverse() -> Dict[str, Interval]:
    reverse: Dict[str, Interval] = {}
    for interval, storage in _STORAGE_FORMS.items():
        if storage in CANONICAL_TOKENS:
            reverse[storage] = CANONICAL_TOKENS[storage]
        elif storage in reverse:
            raise RuntimeError(f"Storage form {storage!r} is shared without a canonical token")
        else:
            reverse[storage] = interval
    reverse.update(_STORAGE_ALIASES)
    return reverse


_REVERSE = _build_reverse()


def _as_interval(token: Union[Interval, str]):
    if isinstance(token, Interval):
        return token
    try:
        return Interval(token)
    except ValueError:
        return None


def encode(token: Union[Interval, str]) -> str:
    """Logical token -> storage representation. Unknown tokens pass through unchanged."""
    interval = _as_interval(token)
    if interval is None:
        logger.debug(f"Unmapped interval token {token!r}, storing as is")
        return str(token)
    return _STORAGE_FORMS[interval]


def decode(storage: str) -> str:
    """Storage representation -> logical token. Unknown values pass through unchanged."""
    interval = _REVERSE.get(storage)
    if interval is None:
        logger.debug(f"Unmapped stored interval {storage!r}, returning as is")
        return storage
    return interval.value


def interval_seconds(token: Union[Interval, str]) -> int:
    """Nominal length of one bar. Months count as 30 days."""
    interval = _as_interval(token)
    if interval is None:
        raise ValueError(f"Unknown interval: {token}")
    return _SECONDS[interval]
