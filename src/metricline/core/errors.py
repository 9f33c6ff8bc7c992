"""Error kinds reported by the metric store and the timeline algorithms.

All of them are recoverable and are normally delivered inside an
:class:`~metricline.core.result.Err` rather than raised.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class MetricsError(Exception):
    """Base class for every metricline failure."""

    default_message = "metrics error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidError(MetricsError):
    """A write was attempted on a closed (uninitialized) store."""

    default_message = "undefined metrics"


class NotNumberError(MetricsError):
    """A value is present (or absent) but cannot be coerced to a number."""

    default_message = "not a number"


class NotFoundError(MetricsError):
    """No value was recorded for a key at or before the requested time."""

    default_message = "not found"


class ExtractionError(MetricsError):
    """Resampling failed for one key; wraps the underlying cause.

    Attributes
    ----------
    key : str
        The requested key that could not be resolved.
    when : datetime | None
        The instant being resolved (the window start for the initial lookup).
    index : int | None
        The snapshot index, when the failure came from walking the timeline.
    value : Any
        The offending stored value, when there was one.
    cause : MetricsError
        The lower-level `NotFoundError` / `NotNumberError`.
    """

    def __init__(
        self,
        key: str,
        cause: MetricsError,
        *,
        when: datetime | None = None,
        index: int | None = None,
        value: Any = None,
    ) -> None:
        self.key = key
        self.cause = cause
        self.when = when
        self.index = index
        self.value = value
        if index is None:
            message = f"error for {key!r} at {when}: {cause}"
        else:
            message = f"snapshot[{index}][{key!r}] = {value!r}: {cause}"
        super().__init__(message)


__all__ = [
    "ExtractionError",
    "InvalidError",
    "MetricsError",
    "NotFoundError",
    "NotNumberError",
]
