"""
Shamir share points and exact Lagrange interpolation at zero.

A (k, n) Shamir scheme hides a secret S as the constant term of a
polynomial of degree k - 1:

    f(x) = a_0 + a_1*x + ... + a_{k-1}*x^{k-1},   a_0 = S

Each share is a point (x_i, f(x_i)). Any k points determine f uniquely,
and evaluating the interpolating polynomial at x = 0 gives back S.

Shares handled here are plain integers (no prime field), so the Lagrange
coefficients are fractions. The whole computation runs in exact Rational
arithmetic: a set of honest shares reproduces the secret bit-for-bit,
while a set containing a corrupted share usually lands on some other
value, often a non-integer one.

See Shamir's 1979 CACM paper for the construction.
"""

from dataclasses import dataclass
from typing import Sequence

from .rational import Rational


@dataclass(frozen=True)
class Share:
    """
    A single decoded share.

    Attributes:
        x: The x-coordinate (share index).
        y: The y-coordinate (decoded share value).
    """

    x: int
    y: int

    def to_dict(self) -> dict:
        # y can exceed the range of JSON consumers' number types
        return {"x": self.x, "y": str(self.y)}


def lagrange_basis_at_zero(shares: Sequence[Share], i: int) -> Rational:
    """
    Evaluate the i-th Lagrange basis polynomial at x = 0.

        L_i(0) = product_{j != i} (0 - x_j) / (x_i - x_j)

    Raises:
        DivideByZeroError: If another share has the same x as shares[i]
    """
    xi = shares[i].x
    basis = Rational.from_int(1)

    for j, share_j in enumerate(shares):
        if i == j:
            continue
        numer = Rational(-share_j.x)
        denom = Rational(xi - share_j.x)
        basis = basis.mul(numer.div(denom))

    return basis


def lagrange_at_zero(shares: Sequence[Share]) -> Rational:
    """
    Value at x = 0 of the unique polynomial of degree < len(shares)
    passing through every share.

        f(0) = sum_i y_i * L_i(0)

    The x values must be pairwise distinct. That is checked when a share
    set is built, not here; a duplicate surfaces as a DivideByZeroError.

    Args:
        shares: k shares with distinct x values

    Returns:
        Exact rational value of the polynomial at zero

    Example:
        >>> str(lagrange_at_zero([Share(1, 3), Share(2, 5)]))
        '1'
    """
    total = Rational.zero()

    for i, share_i in enumerate(shares):
        yi = Rational.from_int(share_i.y)
        total = total.add(yi.mul(lagrange_basis_at_zero(shares, i)))

    return total
