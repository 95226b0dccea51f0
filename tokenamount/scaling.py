"""Decimal scaling between human readable quantities and raw token units.

ERC-20 tokens store balances as integers. A token with `decimals = 6`
stores 1.5 tokens as `1_500_000`. All conversions here are exact:
numbers are parsed as decimal strings and scaled by shifting
the decimal exponent, never by floating point multiplication.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

from .exceptions import ParseError, ValidationError
from .types import HumanAmount, RawAmount

_WHITESPACE = re.compile(r"\s+")

#: Plain decimal notation, no exponent, digit separators or special values
_DECIMAL_STRING = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)")


def _check_decimals(decimals: int):
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValidationError(f"decimals must be an integer, got {decimals!r}")
    if decimals < 0:
        raise ValidationError(f"decimals must be non-negative, got {decimals}")


def _parse_decimal(value: HumanAmount) -> Decimal:
    """Read a human number as an exact decimal."""

    if isinstance(value, bool):
        raise ParseError(f"Cannot parse boolean {value!r} as a number")

    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        # str() of a float is the shortest representation that reads back to the same float,
        # so 0.1 becomes "0.1" and not 0.1000000000000000055511151231257827
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = _WHITESPACE.sub("", value)
        if not text:
            raise ParseError(f"Cannot parse an empty string {value!r} as a number")
        if not _DECIMAL_STRING.fullmatch(text):
            raise ParseError(f"Not a valid decimal number: {value!r}")
        try:
            parsed = Decimal(text)
        except InvalidOperation as e:
            raise ParseError(f"Not a valid decimal number: {value!r}") from e
    else:
        raise ParseError(f"Cannot parse {type(value)} as a number: {value!r}")

    if not parsed.is_finite():
        raise ParseError(f"Number must be finite, got {value!r}")

    return parsed


def expand_to_decimals(value: HumanAmount, decimals: int) -> RawAmount:
    """Convert a human readable quantity to raw token units.

    .. code-block:: python

        assert expand_to_decimals("1.5", 6) == 1_500_000
        assert expand_to_decimals(" 11 111 ", 6) == 11_111_000_000

    :param value:
        Human readable number as a string, a float or a decimal.
        Any whitespace in a string is ignored.

    :param decimals:
        Token decimals

    :return:
        Integer amount in the smallest unit of the token

    :raise ParseError:
        If the value is not a finite number or has more fractional
        digits than the token can present.
    """
    _check_decimals(decimals)

    parsed = _parse_decimal(value)
    sign, digits, exponent = parsed.as_tuple()
    coefficient = int("".join(str(d) for d in digits))
    shift = exponent + decimals

    if shift >= 0:
        result = coefficient * 10**shift
    else:
        divisor = 10**(-shift)
        if coefficient % divisor != 0:
            raise ParseError(f"{value!r} has more fractional digits than {decimals} decimals allow")
        result = coefficient // divisor

    return -result if sign else result


def contract_from_decimals(number: RawAmount, decimals: int) -> Decimal:
    """Convert raw token units to an exact human readable decimal.

    .. code-block:: python

        assert contract_from_decimals(1_500_000, 6) == Decimal("1.5")
    """
    _check_decimals(decimals)

    if isinstance(number, bool) or not isinstance(number, int):
        raise ValidationError(f"Raw token amount must be an integer, got {type(number)}: {number!r}")

    sign = 1 if number < 0 else 0
    digits = tuple(int(c) for c in str(abs(number)))
    return Decimal((sign, digits, -decimals))


def format_units(number: RawAmount, decimals: int, fraction_digits: int = 2, grouping: bool = True) -> str:
    """Format raw token units as a human readable number.

    Rounds half away from zero, as browsers do for currencies.

    .. code-block:: python

        assert format_units(11_111_000_000, 6) == "11,111.00"

    :param fraction_digits:
        How many digits after the decimal point

    :param grouping:
        Use a comma as the thousands separator
    """
    value = contract_from_decimals(number, decimals)
    quantum = Decimal((0, (1,), -fraction_digits))

    # Default context precision of 28 digits is not enough for 18 decimals tokens with big supplies
    with localcontext() as ctx:
        ctx.prec = max(28, len(value.as_tuple().digits) + fraction_digits + 2)
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)

    if grouping:
        return f"{rounded:,.{fraction_digits}f}"
    return f"{rounded:.{fraction_digits}f}"
