"""Metric values and numeric coercion.

A stored value is any Python object. ``int`` and ``float`` are the numeric
variants; ``bool`` is deliberately excluded even though it subclasses ``int``,
so a flag stored as ``True`` is never plotted as ``1.0``.
"""

from __future__ import annotations

from typing import Any, TypeAlias

from .errors import MetricsError, NotNumberError
from .result import Result, err, ok

Value: TypeAlias = Any


def is_number(value: Value) -> bool:
    """Return ``True`` when `value` is one of the numeric variants."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def as_number(value: Value) -> Result[float, MetricsError]:
    """Coerce `value` to ``float``, or return ``Err(NotNumberError)``."""
    if is_number(value):
        return ok(float(value))
    return err(NotNumberError())


__all__ = ["Value", "as_number", "is_number"]
