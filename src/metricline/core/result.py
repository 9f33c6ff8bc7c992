"""Typed Result container for explicit success/failure returns.

Motivation
----------
Timeline queries fail in ordinary, expected ways: a key was never recorded
before the requested instant, or a stored value is text rather than a number.
Those outcomes are returned rather than raised, so callers that resample many
keys can decide per key what to do. This module provides a minimal
`Result[T, E]` with:
- `Ok(value)` / `Err(error)` variants,
- introspection: `is_ok`, `is_err`,
- unwraps: `unwrap`, `unwrap_err`.

When the error payload is an exception (always the case inside metricline),
`unwrap()` re-raises that exception so a caller can opt back into ordinary
exception flow with one call.

Example
-------
>>> from metricline.core.result import ok, err, Result
>>> def parse_int(x: str) -> Result[int, str]:
...     return ok(int(x)) if x.isdigit() else err("not a digit")
>>> parse_int("42").unwrap()
42
>>> parse_int("x").unwrap_err()
'not a digit'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
E = TypeVar("E")


class Result(Generic[T, E]):
    """Sum type representing either success (`Ok[T]`) or failure (`Err[E]`)."""

    # ----- Introspection -----------------------------------------------------
    def is_ok(self) -> bool:
        """Return ``True`` if this is an :class:`Ok` value."""
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` if this is an :class:`Err` value."""
        return isinstance(self, Err)

    # ----- Unwraps -----------------------------------------------------------
    def unwrap(self) -> T:
        """Return the inner value if ``Ok``, else raise.

        An exception payload is raised as-is; any other payload is wrapped in
        :class:`RuntimeError`.
        """
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        error = cast(Err[T, E], self).error
        if isinstance(error, BaseException):
            raise error
        raise RuntimeError(f"Attempted to unwrap Err: {self!r}")

    def unwrap_err(self) -> E:
        """Return the error value if ``Err``, else raise."""
        if isinstance(self, Err):
            return cast(Err[T, E], self).error
        raise RuntimeError(f"Attempted to unwrap_err on Ok: {self!r}")

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        if isinstance(self, Ok):
            return f"Ok({cast(Ok[T, E], self).value!r})"
        if isinstance(self, Err):
            return f"Err({cast(Err[T, E], self).error!r})"
        return "Result(?)"


@dataclass(frozen=True)
class Ok(Result[T, E]):
    """Successful result wrapping a value of type ``T``."""

    value: T


@dataclass(frozen=True)
class Err(Result[T, E]):
    """Failed result wrapping an error payload of type ``E``."""

    error: E


def ok(value: T) -> Result[T, E]:
    """Construct :class:`Ok` with better type inference at call sites."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Construct :class:`Err` with better type inference at call sites."""
    return Err(error)
