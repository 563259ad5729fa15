from __future__ import annotations
from typing import Sequence, cast

import pandas as pd

from . import canon, exceptions
from .types import Measurement


def assert_measurements(measurements: Sequence[Measurement]) -> None:
    """Merged output must be ascending and unique on (timestamp, resolution, tariff)."""
    seen: set[tuple] = set()
    previous = None
    for m in measurements:
        if m.timestamp.tzinfo is None:
            raise exceptions.EnergiatiliError("Measurement timestamp must be tz-aware.")
        if previous is not None and m.timestamp < previous:
            raise exceptions.EnergiatiliError(
                f"Measurements not sorted ascending at {m.timestamp.isoformat()}."
            )
        if m.key in seen:
            raise exceptions.EnergiatiliError(
                f"Duplicate measurement {m.resolution.value}/{m.tariff.value} "
                f"at {m.timestamp.isoformat()}."
            )
        seen.add(m.key)
        previous = m.timestamp


def assert_frame(df: pd.DataFrame) -> None:
    if df.index.name != canon.INDEX_NAME:
        raise exceptions.EnergiatiliError(f"Index must be '{canon.INDEX_NAME}'.")
    tz_index = cast(pd.DatetimeIndex, df.index)
    if tz_index.tz is None:
        raise exceptions.EnergiatiliError("Index must be tz-aware.")
    for col in canon.REQUIRED_COLS:
        if col not in df.columns:
            raise exceptions.EnergiatiliError(f"Missing required column '{col}'.")
    if not df.index.is_monotonic_increasing:
        raise exceptions.EnergiatiliError("Index must be sorted ascending.")
