from __future__ import annotations
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from . import utils
from .types import Resolution, Tariff

# Field aliases are the report's own names and must match exactly.
_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class RawSample(BaseModel):
    """One `[ms, value]` pair of a series; cast happens in timeindex."""

    model_config = _MODEL_CONFIG

    timestamp_ms: Any
    value: Any

    @model_serializer
    def _as_pair(self) -> list:
        return [self.timestamp_ms, self.value]


class Series(BaseModel):
    model_config = _MODEL_CONFIG

    data: list[RawSample] = Field(alias="Data")
    data_count: Optional[int] = Field(default=None, alias="DataCount")
    name: Optional[str] = Field(default=None, alias="Name")
    resolution: Optional[str] = Field(default=None, alias="Resolution")
    start: Optional[datetime] = Field(default=None, alias="Start")
    stop: Optional[datetime] = Field(default=None, alias="Stop")
    series_type: Optional[str] = Field(default=None, alias="Type")
    unit: Optional[str] = Field(default=None, alias="Unit")

    @field_validator("data", mode="before")
    @classmethod
    def _pairs_to_samples(cls, v: Any) -> Any:
        if not isinstance(v, (list, tuple)):
            return v
        out = []
        for item in v:
            if isinstance(item, (list, tuple)):
                if len(item) != 2:
                    raise ValueError(
                        f"Data element must be a [timestamp, value] pair, got {len(item)} items"
                    )
                item = {"timestamp_ms": item[0], "value": item[1]}
            out.append(item)
        return out


def _empty_series() -> Series:
    return Series(data=[])


class Consumption(BaseModel):
    """Consumption series of one tariff zone."""

    model_config = _MODEL_CONFIG

    series: Series = Field(alias="Series")
    tariff_time_zone_name: str = Field(alias="TariffTimeZoneName")

    @property
    def tariff(self) -> Tariff:
        return Tariff.from_label(self.tariff_time_zone_name)


class ResolutionBlock(BaseModel):
    model_config = _MODEL_CONFIG

    consumptions: list[Consumption] = Field(alias="Consumptions")
    consumption_statuses: Series = Field(
        default_factory=_empty_series, alias="ConsumptionStatuses"
    )
    temperature: Series = Field(default_factory=_empty_series, alias="Temperature")


class PriceInterval(BaseModel):
    """Closed [start_time, end_time] with a fixed per-kWh price."""

    model_config = _MODEL_CONFIG

    start_time: datetime = Field(alias="StartTime")
    end_time: datetime = Field(alias="EndTime")
    price_no_vat: Optional[float] = Field(default=None, alias="PriceNoVat")
    price_with_vat: float = Field(alias="PriceWithVat")

    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return utils.to_utc(v)

    def contains(self, ts: datetime) -> bool:
        return self.start_time <= ts <= self.end_time


class PriceList(BaseModel):
    model_config = _MODEL_CONFIG

    time_based_energy_day_prices: list[PriceInterval] = Field(
        alias="TimeBasedEnergyDayPrices"
    )
    time_based_energy_night_prices: list[PriceInterval] = Field(
        alias="TimeBasedEnergyNightPrices"
    )

    def intervals(self, tariff: Tariff) -> list[PriceInterval]:
        if tariff is Tariff.DAY:
            return self.time_based_energy_day_prices
        return self.time_based_energy_night_prices


class Model(BaseModel):
    """The report's `var model` object."""

    model_config = _MODEL_CONFIG

    hours: ResolutionBlock = Field(alias="Hours")
    days: ResolutionBlock = Field(alias="Days")
    months: ResolutionBlock = Field(alias="Months")
    years: ResolutionBlock = Field(alias="Years")
    network_price_list: PriceList = Field(alias="NetworkPriceList")
    sales_price_list: Optional[PriceList] = Field(default=None, alias="SalesPriceList")

    def block(self, resolution: Resolution) -> ResolutionBlock:
        return getattr(self, resolution.model_field)
