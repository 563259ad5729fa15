"""
Merge of the four resolution blocks into one ordered measurement list.

Work fans out as one task per (resolution, tariff bucket). Each task builds
its own indexes and returns an ordered partial list; the partials are joined
on the calling thread, so no result structure is shared between workers.

Records are identified by (timestamp, resolution, tariff). Hourly, daily,
monthly and yearly rows routinely share a timestamp (a month start is also a
day start and an hour start) and all of them are kept.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, Optional

from . import canon, exceptions, ingest, timeindex
from .measurement import assemble
from .schema import Consumption, Model
from .timeindex import TimeIndex
from .types import Measurement, Resolution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _BucketTask:
    resolution: Resolution
    position: int
    bucket: Consumption
    statuses: TimeIndex
    temperatures: TimeIndex


def _sort_key(m: Measurement):
    return m.sort_key


def _plan(model: Model, resolutions: Iterable[Resolution]) -> list[_BucketTask]:
    tasks: list[_BucketTask] = []
    for resolution in resolutions:
        block = model.block(resolution)
        # status and temperature are shared by every bucket of the block
        statuses = timeindex.quality_index(block.consumption_statuses)
        temperatures = timeindex.temperature_index(block.temperature)
        for position, bucket in enumerate(block.consumptions):
            tasks.append(
                _BucketTask(resolution, position, bucket, statuses, temperatures)
            )
    return tasks


def _run(task: _BucketTask, model: Model, tz: str | tzinfo) -> list[Measurement]:
    tariff = task.bucket.tariff
    consumptions = timeindex.consumption_index(task.bucket.series)
    out = [
        assemble(
            task.resolution,
            tariff,
            ms,
            value,
            statuses=task.statuses,
            temperatures=task.temperatures,
            network=model.network_price_list,
            sales=model.sales_price_list,
            tz=tz,
        )
        for ms, value in consumptions.items()
    ]
    out.sort(key=_sort_key)
    logger.debug(
        "%s/%s bucket %d: %d measurements",
        task.resolution.value,
        tariff.value,
        task.position,
        len(out),
    )
    return out


def _reduce(partials: Iterable[list[Measurement]]) -> list[Measurement]:
    merged: dict[tuple, Measurement] = {}
    for part in partials:
        for m in part:
            if m.key in merged:
                # two buckets of one resolution carrying the same tariff label
                logger.warning(
                    "Duplicate %s/%s measurement at %s; keeping the later bucket",
                    m.resolution.value,
                    m.tariff.value,
                    m.timestamp.isoformat(),
                )
            merged[m.key] = m
    return sorted(merged.values(), key=_sort_key)


def _execute(
    tasks: list[_BucketTask],
    model: Model,
    tz: str | tzinfo,
    max_workers: Optional[int],
) -> list[list[Measurement]]:
    workers = max_workers or min(len(tasks), canon.DEFAULT_MAX_WORKERS)
    if workers <= 1 or len(tasks) <= 1:
        return [_run(task, model, tz) for task in tasks]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_run, task, model, tz) for task in tasks]
        try:
            # collected in submission order so the reduce is deterministic
            return [f.result() for f in futures]
        except exceptions.EnergiatiliError:
            for f in futures:
                f.cancel()
            raise


def normalize(
    model: Model,
    *,
    tz: str | tzinfo = canon.DEFAULT_TZ,
    max_workers: Optional[int] = None,
    resolutions: Optional[Iterable[Resolution]] = None,
) -> list[Measurement]:
    """
    Build the full priced measurement list from a parsed model.

    Output is ascending by timestamp (ties broken by resolution, then tariff).
    Any fatal condition (unknown tariff label, non-numeric sample, DST gap)
    aborts the whole call; there is no partial result.
    """
    if max_workers is not None and max_workers < 1:
        raise ValueError("max_workers must be >= 1")

    tasks = _plan(model, list(Resolution) if resolutions is None else resolutions)
    measurements = _reduce(_execute(tasks, model, tz, max_workers))
    logger.info(
        "Normalized %d measurements from %d tariff buckets",
        len(measurements),
        len(tasks),
    )
    return measurements


def normalize_resolution(
    model: Model,
    resolution: Resolution,
    *,
    tz: str | tzinfo = canon.DEFAULT_TZ,
) -> list[Measurement]:
    """Measurements of a single resolution block, computed sequentially."""
    return normalize(model, tz=tz, max_workers=1, resolutions=[resolution])


def normalize_report(
    source: str | Iterable[str],
    *,
    tz: str | tzinfo = canon.DEFAULT_TZ,
    max_workers: Optional[int] = None,
    marker: str = canon.MODEL_MARKER,
) -> list[Measurement]:
    """Report page in, measurements out: extract, repair, parse, normalize."""
    model = ingest.from_report_html(source, tz=tz, marker=marker)
    return normalize(model, tz=tz, max_workers=max_workers)
