import copy
from datetime import datetime

import pytest

TZ = "Europe/Helsinki"
_EPOCH = datetime(1970, 1, 1)


def _local_ms(*args) -> int:
    """Wall-clock datetime parts → the report's local-civil epoch milliseconds."""
    return int((datetime(*args) - _EPOCH).total_seconds() * 1000)


def _series(pairs):
    return {
        "Data": [list(p) for p in pairs],
        "DataCount": len(pairs),
        "Name": "series",
        "Resolution": "Hour",
        "Type": "Consumption",
        "Unit": "kWh",
    }


def _interval(price, start="2022-01-01T00:00:00Z", end="2023-12-31T23:59:59Z"):
    return {"StartTime": start, "EndTime": end, "PriceNoVat": price / 1.24, "PriceWithVat": price}


@pytest.fixture
def local_ms():
    return _local_ms


@pytest.fixture
def series():
    return _series


@pytest.fixture
def interval():
    return _interval


@pytest.fixture
def model_dict():
    # Hours: one day bucket, one night bucket; status/temperature only at 08:00
    hours = {
        "Consumptions": [
            {
                "TariffTimeZoneName": "Päivä",
                "Series": _series(
                    [(_local_ms(2023, 1, 15, 8), 1.5), (_local_ms(2023, 1, 15, 9), 2.0)]
                ),
            },
            {
                "TariffTimeZoneName": "Yö",
                "Series": _series([(_local_ms(2023, 1, 15, 23), 0.5)]),
            },
        ],
        "ConsumptionStatuses": _series([(_local_ms(2023, 1, 15, 8), 3)]),
        "Temperature": _series([(_local_ms(2023, 1, 15, 8), -5.5)]),
    }
    days = {
        "Consumptions": [
            {"TariffTimeZoneName": "Päivä", "Series": _series([(_local_ms(2023, 1, 15), 20.0)])},
            {"TariffTimeZoneName": "Yö", "Series": _series([(_local_ms(2023, 1, 15), 8.0)])},
        ],
        "ConsumptionStatuses": _series([]),
        "Temperature": _series([(_local_ms(2023, 1, 15), -7.0)]),
    }
    months = {
        "Consumptions": [
            {"TariffTimeZoneName": "Päivä", "Series": _series([(_local_ms(2023, 1, 1), 400.0)])},
        ],
        "ConsumptionStatuses": _series([]),
        "Temperature": _series([]),
    }
    years = {"Consumptions": [], "ConsumptionStatuses": _series([]), "Temperature": _series([])}
    return {
        "Hours": hours,
        "Days": days,
        "Months": months,
        "Years": years,
        "NetworkPriceList": {
            "TimeBasedEnergyDayPrices": [_interval(0.04)],
            "TimeBasedEnergyNightPrices": [_interval(0.02)],
        },
        "SalesPriceList": {
            "TimeBasedEnergyDayPrices": [_interval(0.10)],
            "TimeBasedEnergyNightPrices": [_interval(0.08)],
        },
        "SomeVendorField": {"ignored": True},
    }


@pytest.fixture
def model_dict_no_sales(model_dict):
    out = copy.deepcopy(model_dict)
    del out["SalesPriceList"]
    return out


@pytest.fixture
def model(model_dict):
    from energiatili import ingest

    return ingest.from_dict(model_dict)
