"""Two-column markdown rendering of a single snapshot.

Layout::

    key | value at Mon Jan  2 15:04:05 UTC 2006
    ----|------
    a | 4
    b | two

Keys are sorted and the text always ends with a newline.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .store.snapshot import Snapshot


def format_unix_date(when: datetime) -> str:
    """Format `when` like the Unix ``date`` command (day padded with a space)."""
    parts = [
        when.strftime("%a %b"),
        f"{when.day:2d}",
        when.strftime("%H:%M:%S"),
        when.tzname() or "",
        str(when.year),
    ]
    return " ".join(p for p in parts if p)


def dump_md_table(snapshot: Snapshot) -> str:
    """Return a markdown table of every value held by `snapshot`."""
    lines = [f"key | value at {format_unix_date(snapshot.when)}", "----|------"]
    lines.extend(f"{key} | {snapshot.values[key]}" for key in sorted(snapshot.values))
    return "\n".join(lines) + "\n"


__all__ = ["dump_md_table", "format_unix_date"]
