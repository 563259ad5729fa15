from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional

from .schema import PriceInterval, PriceList
from .types import Price, Tariff


def find_interval(
    timestamp: datetime, intervals: Iterable[PriceInterval]
) -> Optional[PriceInterval]:
    """
    First interval whose closed range [start, end] contains timestamp.

    Lists are scanned in the order given; overlapping intervals are resolved by
    position, so callers control priority through ordering.
    """
    for interval in intervals:
        if interval.contains(timestamp):
            return interval
    return None


def _unit_price(
    timestamp: datetime, tariff: Tariff, price_list: Optional[PriceList]
) -> Optional[float]:
    if price_list is None:
        return None
    interval = find_interval(timestamp, price_list.intervals(tariff))
    return None if interval is None else interval.price_with_vat


def find_price(
    timestamp: datetime,
    tariff: Tariff,
    network: PriceList,
    sales: Optional[PriceList] = None,
) -> Price:
    """
    Per-kWh transfer and energy price (VAT included) for one UTC instant.

    The network list is mandatory; without a sales contract the energy side
    is always absent. A side with no matching interval is absent too.
    """
    return Price(
        transfer=_unit_price(timestamp, tariff, network),
        energy=_unit_price(timestamp, tariff, sales),
    )
