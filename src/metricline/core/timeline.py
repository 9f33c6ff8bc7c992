"""
Timeline algorithms over sequences of snapshots.

A *timeline* is a ``list[Snapshot]`` ordered by ``when`` (non-decreasing).
This module provides the three operations that make such a list useful:

- :func:`trim` compacts a timeline in place by removing values that did not
  change since the previous recorded value. The newest snapshot is always left
  complete.
- :func:`infer` answers "what was the value of `key` at time `t`" on a
  compacted timeline by walking backward past the holes left by :func:`trim`.
- :func:`extract_numbers` resamples several keys onto one shared, strictly
  increasing time axis, ready for plotting or CSV export.

None of these functions lock anything; callers must not mutate a timeline from
another thread while one of them is running.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from .errors import ExtractionError, MetricsError, NotFoundError
from .result import Result, err, ok
from .settings import get_logger
from .store.snapshot import Snapshot
from .values import as_number

logger = get_logger(__name__)

_EPOCH_AWARE = datetime(1970, 1, 1, tzinfo=UTC)
_EPOCH_NAIVE = datetime(1970, 1, 1)


@dataclass(frozen=True, slots=True)
class Inference:
    """Outcome of :func:`infer`: where the value was recorded, and the value."""

    index: int
    value: Any


# ----------------------------------------------------------------------------
# Trim
# ----------------------------------------------------------------------------


def trim(snaps: list[Snapshot]) -> list[Snapshot]:
    """
    Remove redundant entries from a timeline.

    Every snapshot except the newest loses the entries whose string form equals
    the last value recorded for that key; snapshots left empty are dropped.
    Comparison is by ``str(value)`` because arbitrary stored objects do not
    compare uniformly.

    The list is edited in place and also returned. The last element of the
    result is a full snapshot.
    """
    if len(snaps) < 2:
        return snaps

    latest: dict[str, str] = {}
    kept: list[Snapshot] = []
    dropped_entries = 0
    for snap in snaps[:-1]:
        redundant: list[str] = []
        for key, value in snap.values.items():
            text = str(value)
            if latest.get(key) == text:
                redundant.append(key)
            else:
                latest[key] = text
        snap.discard(redundant)
        dropped_entries += len(redundant)
        if snap.values:
            kept.append(snap)
    kept.append(snaps[-1])

    logger.debug(
        "trimmed timeline: %d -> %d snapshots, %d redundant entries",
        len(snaps),
        len(kept),
        dropped_entries,
    )
    snaps[:] = kept
    return snaps


# ----------------------------------------------------------------------------
# Infer
# ----------------------------------------------------------------------------


def infer(snaps: Sequence[Snapshot], t: datetime, key: str) -> Result[Inference, MetricsError]:
    """
    Return the most recent value recorded for `key` at or before `t`.

    Returns
    -------
    Result[Inference, MetricsError]
        ``Ok(Inference(index, value))`` naming the snapshot holding the value,
        or ``Err(NotFoundError)`` when the timeline is empty, starts after `t`,
        or never recorded `key` by then.
    """
    if not snaps or snaps[0].when > t:
        return err(NotFoundError())

    before = bisect_right(snaps, t, key=lambda s: s.when)
    for index in range(before - 1, -1, -1):
        values = snaps[index].values
        if key in values:
            return ok(Inference(index=index, value=values[key]))
    return err(NotFoundError())


# ----------------------------------------------------------------------------
# ExtractNumbers
# ----------------------------------------------------------------------------


def quantize(t: datetime, granularity: timedelta) -> float:
    """Return the number of whole `granularity` units between the epoch and `t`."""
    epoch = _EPOCH_NAIVE if t.tzinfo is None else _EPOCH_AWARE
    return float((t - epoch) // granularity)


def extract_numbers(
    snaps: Sequence[Snapshot],
    granularity: timedelta,
    start: datetime,
    end: datetime,
    keys: Sequence[str],
) -> Result[list[list[float]], MetricsError]:
    """
    Resample `keys` onto a shared time axis over ``[start, end)``.

    Each output row is ``[tick, value(keys[0]), value(keys[1]), ...]`` where
    ``tick`` is the row time quantized by `granularity` (see :func:`quantize`).
    Rows are strictly increasing in ``tick``; updates falling on the same tick
    are coalesced into one row holding the latest values.

    Every key must have a numeric value inferable at `start`. The first row is
    placed at `start`; a closing row at `end` is added unless the last
    snapshot before `end` already falls on that tick.

    Returns
    -------
    Result[list[list[float]], MetricsError]
        The rows, or ``Err(ExtractionError)`` naming the key that could not be
        resolved or coerced.

    Raises
    ------
    ValueError
        If `granularity` is not positive.
    """
    if granularity <= timedelta(0):
        raise ValueError(f"granularity must be positive, got {granularity}")

    current: dict[str, float] = {}
    first = -1
    for key in keys:
        found = infer(snaps, start, key)
        if found.is_err():
            logger.debug("cannot infer %r at %s: %s", key, start, found.unwrap_err())
            return err(ExtractionError(key, found.unwrap_err(), when=start))
        hit = found.unwrap()
        number = as_number(hit.value)
        if number.is_err():
            return err(ExtractionError(key, number.unwrap_err(), when=start, value=hit.value))
        current[key] = number.unwrap()
        first = max(first, hit.index)

    end_tick = quantize(end, granularity)
    tick = quantize(start, granularity)
    last_tick: float | None = None
    rows: list[list[float]] = []

    # Snapshots up to `start` hold no requested key newer than the inferred
    # ones, so the walk begins strictly after `start`.
    index = max(first + 1, bisect_right(snaps, start, key=lambda s: s.when))
    done = False
    while True:
        row = [tick, *(current[k] for k in keys)]
        if tick == last_tick:
            rows[-1] = row
        else:
            rows.append(row)
        if done or index >= len(snaps):
            break

        last_tick = tick
        snap = snaps[index]
        if snap.when >= end:
            if end_tick == tick:
                break
            tick = end_tick
            done = True
            continue

        tick = quantize(snap.when, granularity)
        for key in keys:
            if key not in snap.values:
                continue
            value = snap.values[key]
            number = as_number(value)
            if number.is_err():
                return err(ExtractionError(key, number.unwrap_err(), index=index, value=value))
            current[key] = number.unwrap()
        index += 1

    return ok(rows)


__all__ = ["Inference", "extract_numbers", "infer", "quantize", "trim"]
