"""JSON serialisation helpers.

- Raw token amounts travel in JSON as hex encoded `BigNumber` objects,
  because JSON consumers using IEEE doubles cannot read back integers
  above 2**53

- :py:func:`dumps` and :py:func:`loads` wrap `orjson` and know how to encode
  tokens, token amounts and token amount sets
"""
from decimal import Decimal
from typing import Any

import orjson

from .exceptions import ParseError

#: `type` marker of a serialised big number
BIG_NUMBER_TYPE = "BigNumber"


def encode_big_number(number: int) -> dict:
    """Encode an integer as `{"type": "BigNumber", "hex": "0x..."}`.

    Hex digits are lowercase and not padded.
    Negative numbers are written with a leading minus sign: `-0x2a`.
    """
    if isinstance(number, bool) or not isinstance(number, int):
        raise ParseError(f"Can only encode integers as BigNumber, got {type(number)}: {number!r}")
    return {"type": BIG_NUMBER_TYPE, "hex": hex(number)}


def decode_big_number(value: Any) -> int:
    """Decode a serialised big number.

    Accepts

    - `{"type": "BigNumber", "hex": "0x..."}` objects

    - Bare hex strings `"0x..."` and `"-0x..."`

    - Integers, passed through

    :raise ParseError:
        If the value cannot be decoded
    """

    if isinstance(value, bool):
        raise ParseError(f"Cannot decode boolean {value!r} as BigNumber")

    if isinstance(value, int):
        return value

    if isinstance(value, dict):
        number_type = value.get("type", BIG_NUMBER_TYPE)
        if number_type != BIG_NUMBER_TYPE:
            raise ParseError(f"Expected type {BIG_NUMBER_TYPE}, got {number_type!r}")
        if "hex" not in value:
            raise ParseError(f"BigNumber has no hex field: {value!r}")
        value = value["hex"]

    if not isinstance(value, str):
        raise ParseError(f"Cannot decode {type(value)} as BigNumber: {value!r}")

    text = value.strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:]

    if not text.lower().startswith("0x") or len(text) == 2:
        raise ParseError(f"Not a 0x prefixed hex number: {value!r}")

    try:
        number = int(text[2:], 16)
    except ValueError as e:
        raise ParseError(f"Not a 0x prefixed hex number: {value!r}") from e

    return -number if negative else number


def _default(obj: Any) -> Any:
    to_serializable = getattr(obj, "to_serializable", None)
    if to_serializable is not None:
        return to_serializable()

    if isinstance(obj, Decimal):
        return str(obj)

    raise TypeError(f"Type is not JSON serializable: {type(obj)}")


def dumps(obj: Any, indent=False) -> bytes:
    """Serialise a structure containing tokens and amounts to JSON.

    .. code-block:: python

        data = dumps({"id": 1, "amount": usdc.new_amount("42")})
        amount = TokenAmount.resolve(loads(data)["amount"])

    :param indent:
        Pretty print with two spaces
    """
    # Token and TokenAmount are dataclasses, orjson would otherwise bypass to_serializable()
    option = orjson.OPT_PASSTHROUGH_DATACLASS
    if indent:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, default=_default, option=option)


def loads(data: bytes | str) -> Any:
    """Read JSON produced by :py:func:`dumps`.

    Returns plain Python structures.
    Use `Token.resolve()` and `TokenAmount.resolve()` to turn them back to objects.
    """
    return orjson.loads(data)
