from __future__ import annotations
import math
from numbers import Real
from typing import Any, Callable, Iterable, Optional

from . import canon, exceptions
from .schema import RawSample, Series


class TimeIndex(dict):
    """
    Epoch-ms → value lookup for one series.

    Missing timestamps read as the index default instead of raising, since
    status and temperature samples are routinely absent.
    """

    def __init__(self, items: Iterable = (), *, default: Any = None):
        super().__init__(items)
        self.default = default

    def __missing__(self, ms: int) -> Any:
        return self.default

    def lookup(self, ms: int) -> Any:
        return self[ms]


def _number(raw: Any, what: str, ms: Optional[Any]) -> Real:
    # bool is an int subclass but never a sample value
    if isinstance(raw, bool) or not isinstance(raw, Real):
        raise exceptions.CastError(
            f"Non-numeric {what} {raw!r} at timestamp {ms!r}", ms
        )
    return raw


def to_ms(raw: Any) -> int:
    value = _number(raw, "timestamp", raw)
    if not math.isfinite(value):
        raise exceptions.CastError(f"Invalid timestamp {raw!r}", raw)
    return int(value)


def to_int(raw: Any, ms: Any = None) -> int:
    value = _number(raw, "value", ms)
    if not math.isfinite(value):
        raise exceptions.CastError(f"Cannot cast {raw!r} to int at timestamp {ms!r}", ms)
    return int(value)


def to_float(raw: Any, ms: Any = None) -> float:
    return float(_number(raw, "value", ms))


def build(
    samples: Iterable[RawSample],
    cast: Callable[[Any, Any], Any],
    *,
    default: Any = None,
) -> TimeIndex:
    """Index samples by timestamp; a later duplicate overwrites an earlier one."""
    index = TimeIndex(default=default)
    for sample in samples:
        ms = to_ms(sample.timestamp_ms)
        index[ms] = cast(sample.value, ms)
    return index


def quality_index(series: Series) -> TimeIndex:
    return build(series.data, to_int, default=canon.QUALITY_DEFAULT)


def temperature_index(series: Series) -> TimeIndex:
    return build(series.data, to_float, default=canon.TEMPERATURE_DEFAULT)


def consumption_index(series: Series) -> TimeIndex:
    return build(series.data, to_float)
