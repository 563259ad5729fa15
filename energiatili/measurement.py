from __future__ import annotations
from datetime import timezone, tzinfo
from typing import Optional

from . import canon, pricing, utils
from .schema import PriceList
from .timeindex import TimeIndex
from .types import Measurement, Resolution, Tariff


def assemble(
    resolution: Resolution,
    tariff: Tariff,
    ms: int,
    consumption: float,
    *,
    statuses: TimeIndex,
    temperatures: TimeIndex,
    network: PriceList,
    sales: Optional[PriceList] = None,
    tz: str | tzinfo = canon.DEFAULT_TZ,
) -> Measurement:
    """
    Join one consumption sample with its status, temperature and price.

    ``ms`` is the sample's local-civil epoch milliseconds as found in the
    series. Prices in the result are absolute costs: per-kWh price times
    consumption. Resolution only tags the record; it never changes the math.
    """
    localtime = utils.local_ms_to_local(ms, tz)
    timestamp = localtime.astimezone(timezone.utc)

    unit = pricing.find_price(timestamp, tariff, network, sales)

    return Measurement(
        timestamp=timestamp,
        localtime=localtime,
        consumption=consumption,
        quality=statuses.lookup(ms),
        temperature=temperatures.lookup(ms),
        tariff=tariff,
        resolution=resolution,
        price=unit.scaled(consumption),
    )
