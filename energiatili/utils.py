# energiatili/utils.py
from __future__ import annotations
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

from . import canon, exceptions

_EPOCH = datetime(1970, 1, 1)


@lru_cache(maxsize=None)
def _zone_for(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise exceptions.ConfigError(f"Unknown timezone: {name!r}", name) from err


def zone(tz: str | tzinfo = canon.DEFAULT_TZ) -> tzinfo:
    return tz if isinstance(tz, tzinfo) else _zone_for(tz)


def naive_from_ms(ms: int) -> datetime:
    """Epoch milliseconds read as a wall-clock time with no zone attached."""
    try:
        return _EPOCH + timedelta(milliseconds=ms)
    except OverflowError as err:
        raise exceptions.TimeConversionError(
            f"Timestamp out of range: {ms}", ms
        ) from err


def localize(naive: datetime, tz: str | tzinfo = canon.DEFAULT_TZ) -> datetime:
    """
    Attach the civil timezone to a naive wall-clock time.

    - Spring-forward gap (wall time never happened): TimeConversionError.
    - Fall-back overlap (wall time happened twice): the first occurrence,
      i.e. the earlier UTC instant.
    """
    z = zone(tz)
    first = naive.replace(tzinfo=z, fold=0)
    # a gap time does not survive the round trip through UTC
    roundtrip = first.astimezone(timezone.utc).astimezone(z)
    if roundtrip.replace(tzinfo=None) != naive:
        raise exceptions.TimeConversionError(
            f"Local time {naive.isoformat()} does not exist in {z} (DST gap)",
            naive,
        )
    return roundtrip


def local_ms_to_local(ms: int, tz: str | tzinfo = canon.DEFAULT_TZ) -> datetime:
    return localize(naive_from_ms(ms), tz)


def local_ms_to_utc(ms: int, tz: str | tzinfo = canon.DEFAULT_TZ) -> datetime:
    """Convert local-civil epoch milliseconds to a UTC instant."""
    return local_ms_to_local(ms, tz).astimezone(timezone.utc)


def to_utc(ts: datetime) -> datetime:
    """Naive datetimes are taken as UTC already."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_rfc3339(ts: datetime) -> str:
    """RFC3339 with a numeric offset; millisecond precision only when needed."""
    timespec = "seconds" if ts.microsecond == 0 else "milliseconds"
    return ts.isoformat(timespec=timespec)


def epoch_ns(ts: datetime) -> int:
    return int(pd.Timestamp(ts).value)
