"""Tests for parsing the report model: dict, JSON text/stream and HTML page inputs."""

import copy
import io
import json
from datetime import datetime, timezone

import pytest

from energiatili import exceptions, ingest
from energiatili.types import Resolution, Tariff


def test_from_dict_builds_typed_model(model_dict):
    model = ingest.from_dict(model_dict)
    hours = model.block(Resolution.HOUR)
    assert [c.tariff for c in hours.consumptions] == [Tariff.DAY, Tariff.NIGHT]
    first = hours.consumptions[0].series.data[0]
    assert first.value == 1.5
    assert isinstance(first.timestamp_ms, int)
    assert model.sales_price_list is not None
    start = model.network_price_list.time_based_energy_day_prices[0].start_time
    assert start == datetime(2022, 1, 1, tzinfo=timezone.utc)


def test_sales_price_list_is_optional(model_dict_no_sales):
    assert ingest.from_dict(model_dict_no_sales).sales_price_list is None


def test_missing_required_field_raises_schema_error(model_dict):
    broken = copy.deepcopy(model_dict)
    del broken["Days"]
    with pytest.raises(exceptions.SchemaError) as err:
        ingest.from_dict(broken)
    assert any("Days" in p for p in err.value.value)


def test_data_element_must_be_a_pair(model_dict):
    broken = copy.deepcopy(model_dict)
    broken["Hours"]["Temperature"]["Data"] = [[1, 2, 3]]
    with pytest.raises(exceptions.SchemaError):
        ingest.from_dict(broken)


def test_invalid_json_raises_schema_error():
    with pytest.raises(exceptions.SchemaError):
        ingest.from_json('{"Hours": new Date(1)}')


def test_from_reader_accepts_bytes_stream(model_dict):
    stream = io.BytesIO(json.dumps(model_dict).encode("utf-8"))
    model = ingest.from_reader(stream)
    assert len(model.hours.consumptions) == 2


def test_dump_json_replays_to_same_model(model):
    again = ingest.from_json(ingest.dump_json(model))
    assert again == model


def test_extract_model_json_strips_marker_and_semicolon():
    page = "\n".join(
        [
            "<html><script>",
            '  var other = 1;',
            '  var model = {"a": new Date(0)};',
            "</script></html>",
        ]
    )
    assert ingest.extract_model_json(page) == '{"a": new Date(0)}'


def test_extract_model_json_missing_marker():
    with pytest.raises(exceptions.SchemaError):
        ingest.extract_model_json(["<html>", "</html>"])


def test_from_report_html_repairs_and_parses(model_dict, local_ms):
    payload = json.dumps(model_dict, ensure_ascii=False)
    # the report writes interval bounds as local-time Date literals
    payload = payload.replace(
        '"2022-01-01T00:00:00Z"', f"new Date({local_ms(2022, 1, 1, 2)})"
    )
    page = f"<script>\nvar model = {payload};\n</script>"
    model = ingest.from_report_html(page)
    start = model.network_price_list.time_based_energy_day_prices[0].start_time
    assert start == datetime(2022, 1, 1, tzinfo=timezone.utc)
