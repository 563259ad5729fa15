from __future__ import annotations
import logging
from datetime import tzinfo
from typing import IO, Any, Iterable, Mapping

from pydantic import ValidationError

from . import canon, exceptions, preprocess
from .schema import Model

logger = logging.getLogger(__name__)


def _schema_error(err: ValidationError) -> exceptions.SchemaError:
    problems = [
        f"{'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}"
        for e in err.errors()
    ]
    return exceptions.SchemaError(
        f"Invalid telemetry model ({err.error_count()} errors): " + "; ".join(problems),
        problems,
    )


def from_json(text: str | bytes) -> Model:
    """Parse repaired (pure JSON) model text."""
    try:
        return Model.model_validate_json(text)
    except ValidationError as err:
        raise _schema_error(err) from err


def from_reader(stream: IO[str] | IO[bytes]) -> Model:
    """Parse a previously captured JSON model from a text or binary stream."""
    return from_json(stream.read())


def from_dict(obj: Mapping[str, Any]) -> Model:
    """Accept an already deserialized model (e.g. from a fixture or cache)."""
    try:
        return Model.model_validate(obj)
    except ValidationError as err:
        raise _schema_error(err) from err


def extract_model_json(
    source: str | Iterable[str], *, marker: str = canon.MODEL_MARKER
) -> str:
    """
    Pull the model literal out of the report page.

    The first line containing the marker holds the whole object; everything
    after the marker up to the trailing ';' is returned, still unrepaired.
    """
    lines = source.splitlines() if isinstance(source, str) else source
    for line in lines:
        start = line.find(marker)
        if start < 0:
            continue
        payload = line[start + len(marker) :].rstrip()
        if payload.endswith(";"):
            payload = payload[:-1]
        logger.debug("Found model literal (%d chars)", len(payload))
        return payload
    raise exceptions.SchemaError("Model not found", marker)


def from_report_html(
    source: str | Iterable[str],
    *,
    tz: str | tzinfo = canon.DEFAULT_TZ,
    marker: str = canon.MODEL_MARKER,
) -> Model:
    """Extract, repair and parse the model embedded in a report page."""
    raw = extract_model_json(source, marker=marker)
    return from_json(preprocess.fix_new_date(raw, tz))


def dump_json(model: Model, *, indent: int | None = 2) -> str:
    """Serialize back to the report's JSON shape for later replay."""
    return model.model_dump_json(by_alias=True, indent=indent)
