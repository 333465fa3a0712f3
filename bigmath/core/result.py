"""Result[T, E] -- error values at the boundaries of bigmath.

Numeric functions raise; code that has to keep going after a failure
(suite construction, benchmark measurements) returns Result[T, E] instead.
Ok[T] wraps a success value; Err[E] wraps an error value.

Supports: .map, .unwrap_or, .map_err.
Free function: sequence.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, final


@final
@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success variant of Result."""

    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply f to the value, returning Ok(f(value))."""
        return Ok(f(self.value))

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:  # noqa: ARG002
        return self


@final
@dataclass(frozen=True, slots=True)
class Err[E]:
    """Error variant of Result."""

    error: E

    def map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def unwrap_or[T](self, default: T) -> T:
        """Return the default since there is no Ok value."""
        return default

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Apply f to the error, returning Err(f(error))."""
        return Err(f(self.error))


type Result[T, E] = Ok[T] | Err[E]


def sequence[T, E](results: Iterable[Ok[T] | Err[E]]) -> Ok[list[T]] | Err[E]:
    """Collect Results into a Result of list, stopping at the first Err."""
    values: list[T] = []
    for r in results:
        if isinstance(r, Err):
            return r
        values.append(r.value)
    return Ok(values)
