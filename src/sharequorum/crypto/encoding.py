"""
Base-N digit strings <-> arbitrary-precision integers.

Share values are published as digit strings in a base between 2 and 36,
using 0-9 then a-z (case-insensitive) for digits 10-35. Underscores may be
used to group digits and carry no value.
"""

from ..errors import InvalidBaseError, InvalidDigitError


MIN_BASE = 2
MAX_BASE = 36

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _check_base(base: int) -> None:
    if not MIN_BASE <= base <= MAX_BASE:
        raise InvalidBaseError(f"Base must be in range [{MIN_BASE}, {MAX_BASE}], got {base}")


def char_to_digit(ch: str) -> int:
    """
    Map one character to its digit value.

    Raises:
        InvalidDigitError: If ch is not an ASCII letter or decimal digit
    """
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")

    # Only ASCII letters; some non-ASCII letters lower() to two characters
    if ch.isascii() and ch.isalpha():
        return ord(ch.lower()) - ord("a") + 10

    raise InvalidDigitError(f"Invalid digit char: {ch!r}")


def decode_value(digits: str, base: int) -> int:
    """
    Decode a digit string in the given base.

    Digits are consumed most-significant first:
        result = result * base + digit

    Args:
        digits: Digit string, optionally grouped with underscores
        base: Radix in [2, 36]

    Returns:
        Non-negative integer value (0 for an empty string)

    Raises:
        InvalidBaseError: If base is outside [2, 36]
        InvalidDigitError: If a character is not a digit of this base

    Example:
        >>> decode_value("ff", 16)
        255
        >>> decode_value("1_0000", 2)
        16
    """
    _check_base(base)

    result = 0
    for ch in digits.replace("_", ""):
        d = char_to_digit(ch)
        if d >= base:
            raise InvalidDigitError(f"Digit {ch!r} >= base {base}")
        result = result * base + d

    return result


def encode_value(value: int, base: int) -> str:
    """
    Render a non-negative integer in the given base (lowercase digits).

    Raises:
        InvalidBaseError: If base is outside [2, 36]
        ValueError: If value is negative
    """
    _check_base(base)
    if value < 0:
        raise ValueError("Only non-negative values can be encoded")

    if value == 0:
        return "0"

    out = []
    while value:
        value, d = divmod(value, base)
        out.append(DIGITS[d])

    return "".join(reversed(out))
