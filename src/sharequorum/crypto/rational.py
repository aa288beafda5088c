"""
Exact rational arithmetic over arbitrary-precision integers.

Interpolating over the integers (rather than over a prime field) produces
fractional Lagrange coefficients, so every intermediate value is kept as
an exact fraction n/d. Values are always stored in reduced form:

    - d > 0 (the sign lives in the numerator)
    - gcd(|n|, d) == 1

Because of that, two mathematically equal fractions always have identical
(n, d) pairs, which is what lets a Rational be used directly as a
dictionary key when tallying reconstruction results.
"""

from math import gcd
from typing import Optional, Union

from ..errors import DivideByZeroError


class Rational:
    """
    Immutable, normalized fraction numerator/denominator.

    Attributes:
        numerator: Signed numerator, coprime with the denominator.
        denominator: Strictly positive denominator.
    """

    __slots__ = ("_numerator", "_denominator")

    def __init__(self, numerator: int, denominator: int = 1):
        """
        Build and normalize n/d.

        Raises:
            DivideByZeroError: If denominator is 0
        """
        if denominator == 0:
            raise DivideByZeroError("Denominator zero")

        if denominator < 0:
            numerator, denominator = -numerator, -denominator

        # gcd(0, d) == d, so zero always normalizes to 0/1
        g = gcd(numerator, denominator)
        object.__setattr__(self, "_numerator", numerator // g)
        object.__setattr__(self, "_denominator", denominator // g)

    def __setattr__(self, name, value):
        raise AttributeError("Rational is immutable")

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @classmethod
    def zero(cls) -> "Rational":
        return cls(0, 1)

    @classmethod
    def from_int(cls, value: int) -> "Rational":
        """Lift an integer into the rationals."""
        return cls(value, 1)

    @classmethod
    def parse(cls, text: str) -> "Rational":
        """
        Parse the "n" or "n/d" form produced by str().

        Raises:
            ValueError: If text is not an integer or an integer fraction
            DivideByZeroError: If the denominator is 0
        """
        num, sep, den = text.strip().partition("/")
        return cls(int(num), int(den) if sep else 1)

    # --- Arithmetic ---

    def add(self, other: "Rational") -> "Rational":
        return Rational(
            self._numerator * other._denominator + other._numerator * self._denominator,
            self._denominator * other._denominator,
        )

    def sub(self, other: "Rational") -> "Rational":
        return Rational(
            self._numerator * other._denominator - other._numerator * self._denominator,
            self._denominator * other._denominator,
        )

    def mul(self, other: "Rational") -> "Rational":
        return Rational(
            self._numerator * other._numerator,
            self._denominator * other._denominator,
        )

    def div(self, other: "Rational") -> "Rational":
        """
        Divide by another rational.

        Raises:
            DivideByZeroError: If other is zero
        """
        if other._numerator == 0:
            raise DivideByZeroError("Divide by zero")
        return Rational(
            self._numerator * other._denominator,
            self._denominator * other._numerator,
        )

    def neg(self) -> "Rational":
        return Rational(-self._numerator, self._denominator)

    # Operator forms; plain ints are lifted so `Rational(1, 2) * 3` works.

    def __add__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else self.add(other)

    __radd__ = __add__

    def __sub__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else self.sub(other)

    def __rsub__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else other.sub(self)

    def __mul__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else self.mul(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else self.div(other)

    def __rtruediv__(self, other):
        other = _coerce(other)
        return NotImplemented if other is None else other.div(self)

    def __neg__(self) -> "Rational":
        return self.neg()

    # --- Comparison / keying ---

    def key(self) -> tuple[int, int]:
        """Canonical (numerator, denominator) pair."""
        return (self._numerator, self._denominator)

    def __eq__(self, other) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    # --- Conversion ---

    @property
    def is_integer(self) -> bool:
        return self._denominator == 1

    def to_exact_integer(self) -> Optional[int]:
        """Return the value as an int if it is whole, otherwise None."""
        if self._denominator == 1:
            return self._numerator
        return None

    def __str__(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"

    def __reduce__(self):
        return (Rational, (self._numerator, self._denominator))


def _coerce(value: Union["Rational", int]) -> Optional[Rational]:
    if isinstance(value, Rational):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Rational(value, 1)
    return None
