"""Tests for exact rational arithmetic."""

import pickle
from math import gcd

import pytest
from sharequorum.crypto.rational import Rational
from sharequorum.errors import DivideByZeroError


def assert_reduced(r: Rational) -> None:
    assert r.denominator > 0
    assert gcd(abs(r.numerator), r.denominator) == 1


class TestConstruction:
    """Tests for normalization on construction."""

    def test_reduces_by_gcd(self):
        r = Rational(6, 8)
        assert (r.numerator, r.denominator) == (3, 4)

    def test_negative_denominator_moves_sign(self):
        r = Rational(3, -9)
        assert (r.numerator, r.denominator) == (-1, 3)

    def test_both_negative(self):
        r = Rational(-4, -6)
        assert (r.numerator, r.denominator) == (2, 3)

    def test_zero_normalizes(self):
        """0/d is always stored as 0/1."""
        r = Rational(0, -17)
        assert (r.numerator, r.denominator) == (0, 1)

    def test_zero_denominator(self):
        with pytest.raises(DivideByZeroError, match="Denominator zero"):
            Rational(1, 0)

    def test_zero_denominator_is_zero_division(self):
        """Callers catching ZeroDivisionError see it too."""
        with pytest.raises(ZeroDivisionError):
            Rational(0, 0)

    def test_immutable(self):
        r = Rational(1, 2)
        with pytest.raises(AttributeError):
            r.numerator = 5

    def test_from_int_and_zero(self):
        assert Rational.from_int(7) == Rational(7, 1)
        assert Rational.zero() == Rational(0, 5)


class TestArithmetic:
    """Tests for add/sub/mul/div/neg."""

    def test_add(self):
        assert Rational(1, 2).add(Rational(1, 3)) == Rational(5, 6)

    def test_sub(self):
        assert Rational(1, 2).sub(Rational(1, 3)) == Rational(1, 6)

    def test_mul(self):
        assert Rational(2, 3).mul(Rational(9, 4)) == Rational(3, 2)

    def test_div(self):
        assert Rational(2, 3).div(Rational(4, 9)) == Rational(3, 2)

    def test_div_by_negative(self):
        r = Rational(1, 2).div(Rational(-1, 4))
        assert (r.numerator, r.denominator) == (-2, 1)

    def test_div_by_zero(self):
        with pytest.raises(DivideByZeroError, match="Divide by zero"):
            Rational(1, 2).div(Rational.zero())

    def test_neg(self):
        assert Rational(3, 7).neg() == Rational(-3, 7)

    def test_operators(self):
        half = Rational(1, 2)
        assert half + half == 1
        assert 1 - half == half
        assert half * 4 == 2
        assert 1 / half == 2
        assert -half == Rational(-1, 2)

    def test_results_stay_reduced(self):
        """Every operation returns a reduced, positive-denominator value."""
        values = [Rational(n, d) for n in range(-6, 7) for d in (-4, -3, 1, 2, 6)]
        for a in values:
            for b in values[::7]:
                assert_reduced(a + b)
                assert_reduced(a - b)
                assert_reduced(a * b)
                if b != 0:
                    assert_reduced(a / b)

    def test_big_values(self):
        """Arbitrary precision numerators and denominators stay exact."""
        big = Rational(2**400, 3**200)
        assert big * Rational(3**200, 2**400) == 1


class TestKeying:
    """Tests for equality and hashing on the reduced form."""

    def test_equal_unreduced_forms(self):
        assert Rational(2, 4) == Rational(1, 2)
        assert hash(Rational(2, 4)) == hash(Rational(1, 2))

    def test_dict_key(self):
        counts = {Rational(1, 2): 1}
        counts[Rational(3, 6)] = counts.get(Rational(3, 6), 0) + 1
        assert counts == {Rational(1, 2): 2}

    def test_equals_int(self):
        assert Rational(10, 5) == 2
        assert Rational(1, 2) != 0

    def test_not_equal_to_other_types(self):
        assert Rational(1, 2) != "1/2"

    def test_pickle(self):
        """Rationals cross process boundaries intact."""
        r = Rational(-5, 35)
        assert pickle.loads(pickle.dumps(r)) == r


class TestConversion:
    """Tests for integer extraction and text forms."""

    def test_to_exact_integer(self):
        assert Rational(12, 4).to_exact_integer() == 3
        assert Rational(12, 4).is_integer

    def test_to_exact_integer_non_whole(self):
        assert Rational(5, 4).to_exact_integer() is None
        assert not Rational(5, 4).is_integer

    def test_str(self):
        assert str(Rational(-6, 4)) == "-3/2"
        assert str(Rational(8, 4)) == "2"

    def test_parse(self):
        assert Rational.parse("-3/2") == Rational(-3, 2)
        assert Rational.parse("42") == 42

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            Rational.parse("one/two")
