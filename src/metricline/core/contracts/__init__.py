"""Pydantic contracts for documents exchanged with the command line."""

from __future__ import annotations

from .timeline import SnapshotRecord, TimelineDocument

__all__ = ["SnapshotRecord", "TimelineDocument"]
