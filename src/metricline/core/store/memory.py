"""
In-memory metric store with atomic updates and snapshots.

This module implements the live side of metricline: a map from string key to
an arbitrary value, shared by many writer threads. It provides:

- ``set(key, value)`` / ``get(key)``: store and read raw values.
- ``get_number(key)``: read a value coerced to ``float``.
- ``add(key, n)``: numeric increment that replaces non-numeric values.
- ``snap()``: capture a :class:`Snapshot` of every value.

Concurrency
-----------
One :class:`threading.Lock` guards the whole map. Every operation holds it for
its full duration, so a snapshot never observes half of an update.

Lifecycle
---------
A store is usable from construction until :meth:`MetricStore.close`. A closed
store behaves like an absent one: reads return neutral results (``None``, an
empty snapshot, empty keys) while ``set`` reports ``InvalidError``.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from ..errors import InvalidError, MetricsError, NotNumberError
from ..report import dump_md_table
from ..result import Result, err, ok
from ..values import as_number
from .snapshot import Snapshot

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MetricStore:
    """
    Thread-safe key-value store for metric values.

    Attributes
    ----------
    _values : dict[str, Any] | None
        The live mapping; ``None`` once the store is closed.
    _lock : threading.Lock
        Guards ``_values`` for every operation.
    _clock : Clock
        Source of snapshot timestamps (UTC wall clock by default).
    """

    __slots__ = ("_values", "_lock", "_clock")

    def __init__(self, clock: Clock | None = None) -> None:
        self._values: dict[str, Any] | None = {}
        self._lock = threading.Lock()
        self._clock: Clock = clock or _utcnow

    # ------------------------------- KV API ---------------------------------

    def set(self, key: str, value: Any) -> Result[None, MetricsError]:
        """
        Store `value` under `key`.

        Returns
        -------
        Result[None, MetricsError]
            ``Ok(None)`` on success, ``Err(InvalidError)`` on a closed store.
        """
        with self._lock:
            if self._values is None:
                return err(InvalidError())
            self._values[key] = value
            return ok(None)

    def get(self, key: str) -> Any:
        """Return the value for `key`, or ``None`` if unset or closed."""
        with self._lock:
            if self._values is None:
                return None
            return self._values.get(key)

    def get_number(self, key: str) -> Result[float, MetricsError]:
        """Return the value for `key` as a ``float``.

        Missing keys and a closed store both yield ``Err(NotNumberError)``.
        """
        with self._lock:
            if self._values is None:
                return err(NotNumberError())
            value = self._values.get(key)
        return as_number(value)

    def add(self, key: str, n: float) -> None:
        """
        Add `n` to the value of `key`.

        If `key` is unset or holds a non-numeric value it is replaced by `n`.
        Does nothing on a closed store.
        """
        with self._lock:
            if self._values is None:
                return
            current = as_number(self._values.get(key))
            if current.is_ok():
                self._values[key] = current.unwrap() + n
            else:
                self._values[key] = float(n)

    def keys(self) -> tuple[str, ...]:
        """Return the current keys as a sorted tuple."""
        with self._lock:
            if self._values is None:
                return ()
            return tuple(sorted(self._values))

    def __len__(self) -> int:
        with self._lock:
            return 0 if self._values is None else len(self._values)

    # ------------------------------ Snapshots -------------------------------

    def snap(self) -> Snapshot:
        """
        Capture every current value.

        The timestamp is read and the mapping copied while the lock is held,
        so the snapshot is consistent with respect to concurrent writers.
        """
        with self._lock:
            when = self._clock()
            if self._values is None:
                return Snapshot(when=when)
            return Snapshot(when=when, values=dict(self._values))

    def dump_md_table(self) -> str:
        """Render a markdown table of the current values ('' when closed)."""
        with self._lock:
            if self._values is None:
                return ""
            snapshot = Snapshot(when=self._clock(), values=dict(self._values))
        return dump_md_table(snapshot)

    # ------------------------------ Lifecycle -------------------------------

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has been called."""
        with self._lock:
            return self._values is None

    def close(self) -> None:
        """Drop every value; subsequent writes report ``InvalidError``."""
        with self._lock:
            self._values = None


__all__ = ["Clock", "MetricStore"]
