from __future__ import annotations
from typing import Final, Dict, Tuple

INDEX_NAME: Final[str] = "timestamp"
REQUIRED_COLS: Final[list[str]] = [
    "consumption",
    "quality",
    "temperature",
    "tariff",
    "resolution",
    "transfer_price",
    "energy_price",
    "price",
]
DEFAULT_TZ: Final[str] = "Europe/Helsinki"
DEFAULT_MEASUREMENT: Final[str] = "electricity"

# The report page embeds the model as `var model = {...};`
MODEL_MARKER: Final[str] = "var model = "
DATE_LITERAL: Final[str] = "new Date("

QUALITY_DEFAULT: Final[int] = 0
TEMPERATURE_DEFAULT: Final[float] = float("nan")

# Raw TariffTimeZoneName → tariff value
TARIFF_LABELS: Dict[str, str] = {
    "Päivä": "day",
    "Yö": "night",
}

# Resolution value → attribute on the parsed model, in declaration order.
RESOLUTIONS: Final[Tuple[Tuple[str, str], ...]] = (
    ("hour", "hours"),
    ("day", "days"),
    ("month", "months"),
    ("year", "years"),
)

# Upper bound for the (resolution, tariff bucket) fan-out
DEFAULT_MAX_WORKERS: Final[int] = 8
