from __future__ import annotations
from typing import Any, Optional


class EnergiatiliError(Exception):
    """Base error for a failed normalization run.

    ``value`` carries the offending timestamp, label or literal when known.
    """

    def __init__(self, message: str, value: Optional[Any] = None):
        super().__init__(message)
        self.value = value


class ParseError(EnergiatiliError): ...


class SchemaError(EnergiatiliError): ...


class UnsupportedVariantError(EnergiatiliError): ...


class TimeConversionError(EnergiatiliError): ...


class CastError(EnergiatiliError): ...


class ConfigError(EnergiatiliError): ...

