"""Power iterators: successive powers of x at a fixed working precision.

A SeriesCalculator pulls one power per term. It only ever calls
get_current_power() followed by calculate_next_power(), so an iterator
keeps exactly one current power and the factor it multiplies by.
"""

from __future__ import annotations

from decimal import Context, Decimal
from typing import Protocol, final, runtime_checkable

_ONE = Decimal(1)


@runtime_checkable
class PowerIterator(Protocol):
    """Stateful producer of successive powers of x."""

    def get_current_power(self) -> Decimal: ...

    def calculate_next_power(self) -> None: ...


@final
class PowerNIterator:
    """x^0, x^1, x^2, x^3, ..."""

    def __init__(self, x: Decimal, context: Context) -> None:
        self._x = x
        self._context = context
        self._power = _ONE

    def get_current_power(self) -> Decimal:
        return self._power

    def calculate_next_power(self) -> None:
        self._power = self._context.multiply(self._power, self._x)


@final
class PowerTwoNIterator:
    """x^0, x^2, x^4, x^6, ..."""

    def __init__(self, x: Decimal, context: Context) -> None:
        self._context = context
        self._x_squared = context.multiply(x, x)
        self._power = _ONE

    def get_current_power(self) -> Decimal:
        return self._power

    def calculate_next_power(self) -> None:
        self._power = self._context.multiply(self._power, self._x_squared)


@final
class PowerTwoNPlusOneIterator:
    """x^1, x^3, x^5, x^7, ..."""

    def __init__(self, x: Decimal, context: Context) -> None:
        self._context = context
        self._x_squared = context.multiply(x, x)
        self._power = x

    def get_current_power(self) -> Decimal:
        return self._power

    def calculate_next_power(self) -> None:
        self._power = self._context.multiply(self._power, self._x_squared)
