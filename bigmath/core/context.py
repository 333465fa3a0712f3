"""Decimal contexts and the refined Precision type.

Every calculation in bigmath takes a decimal.Context whose ``prec`` is the
number of significant digits wanted in the result. Contexts are derived
from BIGMATH_DECIMAL_CONTEXT (ROUND_HALF_EVEN, traps for
InvalidOperation/DivisionByZero/Overflow) so that arithmetic failures raise
instead of producing NaN or Infinity.

EXACT_CONTEXT is used for additions and multiplications that must not
round (term products and series sums).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN
from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import final

from bigmath.core.result import Err, Ok

BIGMATH_DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

EXACT_CONTEXT = Context(
    prec=MAX_PREC,
    rounding=_ROUND_HALF_EVEN,
    Emin=MIN_EMIN,
    Emax=MAX_EMAX,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


# --- Refined types ---


@final
@dataclass(frozen=True, slots=True)
class Precision:
    """Number of significant digits, constrained to be >= 1."""

    digits: int

    def __post_init__(self) -> None:
        if isinstance(self.digits, bool) or not isinstance(self.digits, int) or self.digits < 1:
            raise TypeError(f"Precision requires int >= 1, got {self.digits!r}")

    @staticmethod
    def parse(raw: int) -> Ok[Precision] | Err[str]:
        if isinstance(raw, bool) or not isinstance(raw, int):
            return Err(f"Precision requires int, got {type(raw).__name__}")
        if raw < 1:
            return Err(f"Precision requires >= 1, got {raw}")
        return Ok(Precision(digits=raw))

    def to_context(self) -> Context:
        """Derive a Context with this precision from BIGMATH_DECIMAL_CONTEXT."""
        return math_context(self.digits)


# --- Context helpers ---


def math_context(precision: int, rounding: str = _ROUND_HALF_EVEN) -> Context:
    """Return a fresh Context with ``precision`` significant digits."""
    if precision < 1:
        raise ValueError(f"math_context requires precision >= 1, got {precision}")
    ctx = BIGMATH_DECIMAL_CONTEXT.copy()
    ctx.prec = precision
    ctx.rounding = rounding
    return ctx


def with_guard_digits(context: Context, guard_digits: int) -> Context:
    """Copy of ``context`` carrying ``guard_digits`` additional digits."""
    ctx = context.copy()
    ctx.prec = context.prec + guard_digits
    ctx.clear_flags()
    return ctx


def acceptable_error(context: Context) -> Decimal:
    """10^-(prec+1): terms at or below this magnitude are negligible."""
    return Decimal(1).scaleb(-(context.prec + 1))
