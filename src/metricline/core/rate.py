"""Rate-of-change estimate from a short run of samples."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from .settings import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Sample:
    """A timestamped reading, independent of any store."""

    when: datetime
    value: float


def rate(*samples: Sample) -> float:
    """
    Estimate the per-second rate of change at ``samples[1]``.

    With three or more samples this is the centered difference between the
    first and third (anything after the third is ignored). With two samples it
    is the slope between them, and with fewer it is ``0.0``.

    Samples sharing a timestamp give ``inf``, ``-inf`` or ``nan`` following
    IEEE-754 division, and a warning is logged.
    """
    if len(samples) <= 1:
        return 0.0
    first = samples[0]
    last = samples[1] if len(samples) == 2 else samples[2]

    dv = last.value - first.value
    dt = (last.when - first.when).total_seconds()
    if dt == 0:
        logger.warning("rate over samples sharing timestamp %s", first.when.isoformat())
        return math.nan if dv == 0 else math.copysign(math.inf, dv)
    return dv / dt


__all__ = ["Sample", "rate"]
