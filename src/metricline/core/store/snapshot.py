"""
Snapshot definition.

A snapshot is the record of a metric store at one instant. It is kept apart
from ``memory.py`` so the timeline algorithms and the contracts layer can use
it without importing the store.

Design Notes
------------
- **Ownership**: ``values`` is a mapping of its own, copied under the store
  lock. Later writes to the store never show through. The values themselves
  are shared, so opaque objects such as locks or handles are never copied.
- **Immutability**: the dataclass is frozen, so ``when`` and the mapping
  reference cannot be replaced. The mapping itself may only shrink, and only
  through :meth:`Snapshot.discard`, which the timeline compaction pass uses.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Timestamped copy of every metric value.

    Attributes
    ----------
    when : datetime
        Capture instant.
    values : dict[str, Any]
        Metric key to value, owned by this snapshot.
    """

    when: datetime
    values: dict[str, Any] = field(default_factory=dict)

    def discard(self, keys: Iterable[str]) -> None:
        """Delete `keys` from ``values``; missing keys are ignored."""
        for key in keys:
            self.values.pop(key, None)

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, key: object) -> bool:
        return key in self.values


__all__ = ["Snapshot"]
