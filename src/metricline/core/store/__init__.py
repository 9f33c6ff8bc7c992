"""Live metric store and the snapshots it produces."""

from __future__ import annotations

from .memory import MetricStore
from .snapshot import Snapshot

__all__ = ["MetricStore", "Snapshot"]
