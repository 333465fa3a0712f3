"""Error values for the boundaries of bigmath.

The numeric functions raise (ValueError for domain errors, decimal signals
for arithmetic failures). Callers that must survive a failure turn it into
one of these frozen dataclass values, which can be pattern-matched, logged
and serialized. Base class BigMathError, three @final subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import final


@dataclass(frozen=True, slots=True)
class BigMathError:
    """Base error value. NOT @final -- has subclasses."""

    message: str
    code: str
    source: str  # "module.function" that produced this error

    def with_context(self, context: str) -> BigMathError:
        """Return a copy with context prepended to message."""
        return replace(self, message=f"{context}: {self.message}")

    def to_dict(self) -> dict[str, object]:
        """Serialize to dict with stable keys."""
        return {
            "message": self.message,
            "code": self.code,
            "source": self.source,
        }


@final
@dataclass(frozen=True, slots=True)
class FieldViolation:
    """Describes a single field validation failure."""

    path: str  # e.g. "suite.function_names"
    constraint: str  # e.g. "must match number of calculations"
    actual_value: str  # e.g. "3 != 2"


@final
@dataclass(frozen=True, slots=True)
class ValidationError(BigMathError):
    """One or more fields of an invocation failed validation."""

    fields: tuple[FieldViolation, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            **BigMathError.to_dict(self),
            "fields": [
                {"path": f.path, "constraint": f.constraint, "actual_value": f.actual_value}
                for f in self.fields
            ],
        }


@final
@dataclass(frozen=True, slots=True)
class ArithmeticFailure(BigMathError):
    """A function raised for one input; recorded as a missing data point."""

    function: str
    x: str
    precision: int

    @staticmethod
    def from_exception(
        function: str, x: object, precision: int, exc: Exception, source: str,
    ) -> ArithmeticFailure:
        """Wrap an ArithmeticError or ValueError raised by a calculation."""
        return ArithmeticFailure(
            message=f"{type(exc).__name__}: {exc}",
            code="ARITHMETIC_FAILURE",
            source=source,
            function=function,
            x=str(x),
            precision=precision,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            **BigMathError.to_dict(self),
            "function": self.function,
            "x": self.x,
            "precision": self.precision,
        }
