from . import (
    canon,
    exceptions,
    types,
    utils,
    preprocess,
    schema,
    ingest,
    timeindex,
    pricing,
    measurement,
    merge,
    validate,
    formats,
    config,
)
from .merge import normalize, normalize_report
from .types import Measurement, Price, Resolution, Tariff

__all__ = [
    "canon",
    "exceptions",
    "types",
    "utils",
    "preprocess",
    "schema",
    "ingest",
    "timeindex",
    "pricing",
    "measurement",
    "merge",
    "validate",
    "formats",
    "config",
    "normalize",
    "normalize_report",
    "Measurement",
    "Price",
    "Resolution",
    "Tariff",
]
