from __future__ import annotations
from typing import Any, Iterable, Sequence, cast

import numpy as np
import pandas as pd

from . import canon, utils, validate
from .types import Measurement, MeasurementFrame


_DTYPES: dict[str, Any] = {
    "consumption": float,
    "quality": int,
    "temperature": float,
    "tariff": object,
    "resolution": object,
    "transfer_price": float,
    "energy_price": float,
    "price": float,
}


def _or_nan(value: float | None) -> float:
    return np.nan if value is None else float(value)


def empty_frame() -> MeasurementFrame:
    idx = pd.DatetimeIndex([], tz="UTC", name=canon.INDEX_NAME)
    out = MeasurementFrame(
        {col: pd.Series([], index=idx, dtype=_DTYPES[col]) for col in canon.REQUIRED_COLS},
        index=idx,
    )
    return cast(MeasurementFrame, out)


def to_frame(measurements: Sequence[Measurement]) -> MeasurementFrame:
    """
    Tabular view of the merged output, one row per measurement.

    Absent prices and unreported temperatures become NaN; 'price' is only
    filled where both transfer and energy are known.
    """
    if not measurements:
        return empty_frame()

    idx = pd.DatetimeIndex([m.timestamp for m in measurements], name=canon.INDEX_NAME)
    df = MeasurementFrame(
        {
            "consumption": np.asarray([m.consumption for m in measurements], dtype=float),
            "quality": np.asarray([m.quality for m in measurements], dtype=int),
            "temperature": np.asarray([m.temperature for m in measurements], dtype=float),
            "tariff": [m.tariff.value for m in measurements],
            "resolution": [m.resolution.value for m in measurements],
            "transfer_price": [_or_nan(m.price.transfer) for m in measurements],
            "energy_price": [_or_nan(m.price.energy) for m in measurements],
            "price": [_or_nan(m.price.total) for m in measurements],
        },
        index=idx,
    )
    df = df.tz_convert("UTC")
    validate.assert_frame(df)
    return df


def to_records(measurements: Iterable[Measurement]) -> list[dict[str, Any]]:
    """JSON-safe dicts; an unreported temperature is None, never NaN."""
    return [
        {
            "timestamp": utils.format_rfc3339(m.timestamp),
            "localtime": utils.format_rfc3339(m.localtime),
            "consumption": m.consumption,
            "quality": m.quality,
            "temperature": m.temperature if m.has_temperature else None,
            "tariff": m.tariff.value,
            "resolution": m.resolution.value,
            "transfer_price": m.price.transfer,
            "energy_price": m.price.energy,
            "price": m.price.total,
        }
        for m in measurements
    ]


def to_points(
    measurements: Iterable[Measurement],
    *,
    measurement: str = canon.DEFAULT_MEASUREMENT,
) -> list[dict[str, Any]]:
    """
    Time-series points for the database writer.

    Tags carry both resolution and tariff on every point; without the tariff
    tag, day and night rows of the same instant would share a series key.
    """
    points = []
    for m in measurements:
        fields: dict[str, Any] = {
            "consumption": m.consumption,
            "quality": int(m.quality),
        }
        if m.price.energy is not None:
            fields["energy_price"] = m.price.energy
        if m.price.transfer is not None:
            fields["transfer_price"] = m.price.transfer
        if m.price.total is not None:
            fields["price"] = m.price.total
        if m.has_temperature:
            fields["temperature"] = m.temperature

        points.append(
            {
                "measurement": measurement,
                "tags": {"resolution": m.resolution.value, "tariff": m.tariff.value},
                "fields": fields,
                "time": utils.epoch_ns(m.timestamp),
            }
        )
    return points


def _escape(text: str, chars: str) -> str:
    for ch in ("\\",) + tuple(chars):
        text = text.replace(ch, "\\" + ch)
    return text


def _field_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        return repr(value)
    return '"' + str(value).replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_line_protocol(
    measurements: Iterable[Measurement],
    *,
    measurement: str = canon.DEFAULT_MEASUREMENT,
) -> list[str]:
    """InfluxDB line protocol, nanosecond precision."""
    lines = []
    for point in to_points(measurements, measurement=measurement):
        head = _escape(point["measurement"], ", ")
        tags = ",".join(
            f"{_escape(k, ',= ')}={_escape(v, ',= ')}"
            for k, v in sorted(point["tags"].items())
        )
        fields = ",".join(
            f"{_escape(k, ',= ')}={_field_value(v)}"
            for k, v in point["fields"].items()
        )
        lines.append(f"{head},{tags} {fields} {point['time']}")
    return lines
