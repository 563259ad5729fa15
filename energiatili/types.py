from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

import pandas as pd

from . import canon, exceptions


class Resolution(str, Enum):
    """Aggregation granularity of a telemetry series.

    Declaration order is a taxonomy, not a magnitude; ``rank`` only exists to
    make tie-breaking in the merged output deterministic.
    """

    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"

    @property
    def model_field(self) -> str:
        return dict(canon.RESOLUTIONS)[self.value]

    @property
    def rank(self) -> int:
        return [value for value, _ in canon.RESOLUTIONS].index(self.value)


class Tariff(str, Enum):
    DAY = "day"
    NIGHT = "night"

    @classmethod
    def from_label(cls, label: str) -> "Tariff":
        """Decode a source TariffTimeZoneName such as 'Päivä' or 'Yö'."""
        value = canon.TARIFF_LABELS.get(label)
        if value is None:
            raise exceptions.UnsupportedVariantError(
                f"Unknown tariff encountered: {label!r}", label
            )
        return cls(value)

    @property
    def rank(self) -> int:
        return list(Tariff).index(self)


@dataclass(frozen=True)
class Price:
    """Transfer (network) and energy (sales) price; either side may be absent."""

    transfer: Optional[float] = None
    energy: Optional[float] = None

    @property
    def total(self) -> Optional[float]:
        # only meaningful when both sides resolved
        if self.transfer is None or self.energy is None:
            return None
        return self.transfer + self.energy

    def scaled(self, consumption: float) -> "Price":
        return Price(
            transfer=None if self.transfer is None else self.transfer * consumption,
            energy=None if self.energy is None else self.energy * consumption,
        )


@dataclass(frozen=True)
class Measurement:
    timestamp: datetime  # UTC
    localtime: datetime  # same instant in the civil timezone
    consumption: float  # kWh
    quality: int  # 0 = no status reported
    temperature: float  # °C, nan = not reported
    tariff: Tariff
    resolution: Resolution
    price: Price = field(default_factory=Price)

    @property
    def has_temperature(self) -> bool:
        return not math.isnan(self.temperature)

    @property
    def key(self) -> tuple[datetime, Resolution, Tariff]:
        """Identity of a record in the merged output."""
        return (self.timestamp, self.resolution, self.tariff)

    @property
    def sort_key(self) -> tuple[datetime, int, int]:
        return (self.timestamp, self.resolution.rank, self.tariff.rank)


class MeasurementFrame(pd.DataFrame):
    """
    Tabular view of a merged measurement collection.

    Expected:
      - DatetimeIndex named 'timestamp', tz-aware UTC, ascending
      - Columns: canon.REQUIRED_COLS
    """

    @property
    def _constructor(self):
        return MeasurementFrame

    @property
    def consumption(self) -> pd.Series:
        return self["consumption"]

    @property
    def quality(self) -> pd.Series:
        return self["quality"]

    @property
    def temperature(self) -> pd.Series:
        return self["temperature"]

    @property
    def tariff(self) -> pd.Series:
        return self["tariff"]

    @property
    def resolution(self) -> pd.Series:
        return self["resolution"]
