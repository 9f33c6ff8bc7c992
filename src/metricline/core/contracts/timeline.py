"""Timeline document: the JSON shape the CLI reads and writes.

Example
-------
.. code-block:: json

    {
      "snapshots": [
        {"when": "2026-01-01T00:00:00Z", "values": {"requests": 3, "mode": "warm"}},
        {"when": "2026-01-01T00:00:01Z", "values": {"requests": 5, "mode": "warm"}}
      ]
    }

Notes
-----
- ``when`` is parsed by Pydantic (ISO-8601); values without an offset are
  read as UTC so every snapshot in a document is comparable.
- Snapshots must be in non-decreasing time order; the timeline algorithms
  bisect on ``when``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..store.snapshot import Snapshot


class SnapshotRecord(BaseModel):
    """One serialized snapshot."""

    when: datetime = Field(description="Capture instant")
    values: dict[str, Any] = Field(default_factory=dict, description="Metric key to value")

    @field_validator("when")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        """Read timestamps without an offset as UTC."""
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)

    @classmethod
    def from_snapshot(cls, snap: Snapshot) -> SnapshotRecord:
        """Build a record from an in-memory snapshot."""
        return cls(when=snap.when, values=dict(snap.values))

    def to_snapshot(self) -> Snapshot:
        """Return an in-memory snapshot owning a copy of ``values``."""
        return Snapshot(when=self.when, values=dict(self.values))


class TimelineDocument(BaseModel):
    """An ordered list of snapshot records."""

    snapshots: list[SnapshotRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_order(self) -> TimelineDocument:
        for i in range(1, len(self.snapshots)):
            if self.snapshots[i].when < self.snapshots[i - 1].when:
                raise ValueError(
                    f"snapshots[{i}] at {self.snapshots[i].when.isoformat()} "
                    f"precedes snapshots[{i - 1}]"
                )
        return self

    @classmethod
    def from_snapshots(cls, snaps: list[Snapshot]) -> TimelineDocument:
        """Serialize a timeline."""
        return cls(snapshots=[SnapshotRecord.from_snapshot(s) for s in snaps])

    def to_snapshots(self) -> list[Snapshot]:
        """Return the timeline as a fresh ``list[Snapshot]``."""
        return [record.to_snapshot() for record in self.snapshots]


__all__ = ["SnapshotRecord", "TimelineDocument"]
