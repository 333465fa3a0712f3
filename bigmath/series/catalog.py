"""Concrete power series used by bigmath.decimal_math.

Each class keeps the state of its factor recurrence; the factors are exact
Fractions so they are valid at every precision.

    ExpSeries     sum x^n / n!
    SinSeries     sum (-1)^n x^(2n+1) / (2n+1)!
    CosSeries     sum (-1)^n x^(2n) / (2n)!
    SinhSeries    sum x^(2n+1) / (2n+1)!
    CoshSeries    sum x^(2n) / (2n)!
    AsinSeries    sum (2n)! / (4^n (n!)^2 (2n+1)) x^(2n+1)
    AtanSeries    sum (-1)^n x^(2n+1) / (2n+1)
    AtanhSeries   sum x^(2n+1) / (2n+1)
"""

from __future__ import annotations

from decimal import Context, Decimal
from fractions import Fraction
from typing import final

from bigmath.series.calculator import SeriesCalculator
from bigmath.series.power import (
    PowerIterator,
    PowerNIterator,
    PowerTwoNIterator,
    PowerTwoNPlusOneIterator,
)


@final
class ExpSeries(SeriesCalculator):
    """Taylor series of exp(x); converges for every x, fastest near 0."""

    def __init__(self) -> None:
        super().__init__(calculate_in_pairs=False)
        self._n = 0
        self._one_over_factorial = Fraction(1)

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerNIterator(x, context)

    def get_current_factor(self) -> Fraction:
        return self._one_over_factorial

    def calculate_next_factor(self) -> None:
        self._n += 1
        self._one_over_factorial /= self._n


@final
class SinSeries(SeriesCalculator):
    """Taylor series of sin(x). Alternating, so summed in pairs by default."""

    def __init__(self, calculate_in_pairs: bool = True) -> None:
        super().__init__(calculate_in_pairs=calculate_in_pairs)
        self._n = 0
        self._negative = False
        self._factorial_2n_plus_1 = 1

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNPlusOneIterator(x, context)

    def get_current_factor(self) -> Fraction:
        sign = -1 if self._negative else 1
        return Fraction(sign, self._factorial_2n_plus_1)

    def calculate_next_factor(self) -> None:
        self._factorial_2n_plus_1 *= (2 * self._n + 2) * (2 * self._n + 3)
        self._n += 1
        self._negative = not self._negative


@final
class CosSeries(SeriesCalculator):
    """Taylor series of cos(x). Alternating, so summed in pairs by default."""

    def __init__(self, calculate_in_pairs: bool = True) -> None:
        super().__init__(calculate_in_pairs=calculate_in_pairs)
        self._n = 0
        self._negative = False
        self._factorial_2n = 1

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNIterator(x, context)

    def get_current_factor(self) -> Fraction:
        sign = -1 if self._negative else 1
        return Fraction(sign, self._factorial_2n)

    def calculate_next_factor(self) -> None:
        self._factorial_2n *= (2 * self._n + 1) * (2 * self._n + 2)
        self._n += 1
        self._negative = not self._negative


@final
class SinhSeries(SeriesCalculator):
    def __init__(self) -> None:
        super().__init__(calculate_in_pairs=False)
        self._n = 0
        self._factorial_2n_plus_1 = 1

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNPlusOneIterator(x, context)

    def get_current_factor(self) -> Fraction:
        return Fraction(1, self._factorial_2n_plus_1)

    def calculate_next_factor(self) -> None:
        self._factorial_2n_plus_1 *= (2 * self._n + 2) * (2 * self._n + 3)
        self._n += 1


@final
class CoshSeries(SeriesCalculator):
    def __init__(self) -> None:
        super().__init__(calculate_in_pairs=False)
        self._n = 0
        self._factorial_2n = 1

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNIterator(x, context)

    def get_current_factor(self) -> Fraction:
        return Fraction(1, self._factorial_2n)

    def calculate_next_factor(self) -> None:
        self._factorial_2n *= (2 * self._n + 1) * (2 * self._n + 2)
        self._n += 1


@final
class AsinSeries(SeriesCalculator):
    """Taylor series of asin(x) for |x| < 1; slow close to 1."""

    def __init__(self) -> None:
        super().__init__(calculate_in_pairs=False)
        self._n = 0
        # (2n)! / (4^n (n!)^2)
        self._central = Fraction(1)

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNPlusOneIterator(x, context)

    def get_current_factor(self) -> Fraction:
        return self._central / (2 * self._n + 1)

    def calculate_next_factor(self) -> None:
        self._central = self._central * (2 * self._n + 1) / (2 * (self._n + 1))
        self._n += 1


@final
class AtanSeries(SeriesCalculator):
    """Taylor series of atan(x) for |x| <= 1. Alternating."""

    def __init__(self, calculate_in_pairs: bool = True) -> None:
        super().__init__(calculate_in_pairs=calculate_in_pairs)
        self._n = 0
        self._negative = False

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNPlusOneIterator(x, context)

    def get_current_factor(self) -> Fraction:
        sign = -1 if self._negative else 1
        return Fraction(sign, 2 * self._n + 1)

    def calculate_next_factor(self) -> None:
        self._n += 1
        self._negative = not self._negative


@final
class AtanhSeries(SeriesCalculator):
    """Taylor series of atanh(x) for |x| < 1; log(y) = 2 atanh((y-1)/(y+1))."""

    def __init__(self) -> None:
        super().__init__(calculate_in_pairs=False)
        self._n = 0

    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        return PowerTwoNPlusOneIterator(x, context)

    def get_current_factor(self) -> Fraction:
        return Fraction(1, 2 * self._n + 1)

    def calculate_next_factor(self) -> None:
        self._n += 1
