"""Export views of the merged measurements: frame, records, points, line protocol."""

import json
import math

import pandas as pd

from energiatili import canon, formats, merge, validate
from energiatili.types import Resolution, Tariff


def test_to_frame_shape(model):
    out = merge.normalize(model)
    df = formats.to_frame(out)
    validate.assert_frame(df)
    assert list(df.columns) == canon.REQUIRED_COLS
    assert str(df.index.tz) == "UTC"
    assert len(df) == len(out)
    assert df["quality"].dtype.kind == "i"


def test_to_frame_price_only_when_both_sides(model_dict_no_sales):
    from energiatili import ingest

    df = formats.to_frame(merge.normalize(ingest.from_dict(model_dict_no_sales)))
    assert df["energy_price"].isna().all()
    assert df["price"].isna().all()
    assert df["transfer_price"].notna().all()


def test_empty_frame():
    df = formats.to_frame([])
    assert df.empty
    assert df.index.name == canon.INDEX_NAME
    assert isinstance(df.index, pd.DatetimeIndex)


def test_empty_frame_dtypes_match_populated_frame(model):
    full = formats.to_frame(merge.normalize(model))
    empty = formats.to_frame([])
    assert list(empty.columns) == list(full.columns)
    for col in ("consumption", "quality", "temperature", "price"):
        assert empty[col].dtype == full[col].dtype, col
    assert str(empty.index.tz) == "UTC"


def test_records_are_json_safe(model):
    records = formats.to_records(merge.normalize(model))
    text = json.dumps(records, allow_nan=False)
    assert '"temperature": null' in text


def test_points_skip_unreported_fields(model):
    out = merge.normalize(model)
    points = formats.to_points(out)
    by_key = {
        (p["tags"]["resolution"], p["tags"]["tariff"], p["time"]): p for p in points
    }
    assert len(by_key) == len(points)

    night = next(
        p for p in points if p["tags"] == {"resolution": "hour", "tariff": "night"}
    )
    assert "temperature" not in night["fields"]
    assert night["fields"]["quality"] == 0
    assert math.isclose(night["fields"]["price"], 0.5 * 0.02 + 0.5 * 0.08)


def test_point_time_is_nanoseconds(model):
    m = merge.normalize(model)[0]
    point = formats.to_points([m])[0]
    assert point["time"] == int(m.timestamp.timestamp()) * 1_000_000_000
    assert point["measurement"] == "electricity"


def test_line_protocol(model):
    hour = [
        m
        for m in merge.normalize(model)
        if m.resolution is Resolution.HOUR and m.tariff is Tariff.DAY
    ][0]
    (line,) = formats.to_line_protocol([hour], measurement="power use")
    ts = line.rsplit(" ", 1)[1]
    assert line.startswith("power\\ use,resolution=hour,tariff=day ")
    assert "quality=3i" in line
    assert "temperature=-5.5" in line
    assert ts == str(int(hour.timestamp.timestamp()) * 1_000_000_000)
