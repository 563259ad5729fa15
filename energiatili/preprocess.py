"""
Repair of the `new Date(<ms>)` literals embedded in the report model.

The report page is JavaScript, not JSON: timestamps appear as
``new Date(1514757600000)``. The argument is epoch milliseconds of the
*Finnish wall clock*, not UTC, so it goes through the civil-time conversion
before being written back as a quoted RFC3339 string.
"""

from __future__ import annotations
import logging
import re
from datetime import tzinfo

from . import canon, exceptions, utils

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")


def _parse_ms(arg: str, offset: int) -> int:
    # ASCII digits only; int() would also take other Unicode digits
    if _INTEGER.fullmatch(arg) is None:
        raise exceptions.ParseError(
            f"new Date() argument is not an integer at offset {offset}: {arg!r}",
            arg,
        )
    return int(arg)


def fix_new_date(buf: str, tz: str | tzinfo = canon.DEFAULT_TZ) -> str:
    """
    Replace every `new Date(<int>)` with `"<RFC3339 UTC>"`.

    Text without a literal is returned unchanged.
    """
    literal = canon.DATE_LITERAL
    pieces: list[str] = []
    pos = 0
    count = 0

    while True:
        start = buf.find(literal, pos)
        if start < 0:
            pieces.append(buf[pos:])
            break

        arg_start = start + len(literal)
        end = buf.find(")", arg_start)
        if end < 0:
            raise exceptions.ParseError(
                f"Missing ')' for new Date( at offset {start}", buf[start:]
            )

        ms = _parse_ms(buf[arg_start:end], start)
        timestamp = utils.local_ms_to_utc(ms, tz)

        pieces.append(buf[pos:start])
        pieces.append(f'"{utils.format_rfc3339(timestamp)}"')
        pos = end + 1
        count += 1

    if count:
        logger.debug("Repaired %d new Date() literals", count)
    return "".join(pieces)
