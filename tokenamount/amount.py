"""Token amounts.

:py:class:`TokenAmount` is an exact integer quantity of a token,
in the smallest unit of the token. It never goes through floating point.

.. code-block:: python

    from tokenamount.amount import TokenAmount

    a = TokenAmount.resolve(usdc, "3")
    b = usdc.new_amount(2_000_000)

    assert str(a + b) == "USDC 5.00"
    assert a.greater_than("2.5")

Plain Python numbers used as operands follow :py:meth:`tokenamount.token.Token.new_amount`:
`int` is raw units, `str`, `float` and `Decimal` are human readable amounts.
"""
from dataclasses import dataclass, field, InitVar
from decimal import Decimal
from typing import Any, Optional, Union, Mapping

from .exceptions import ConstructionError, TokenMismatch, UnsupportedError, ValidationError
from .serialisation import encode_big_number, decode_big_number
from .source import SourceKind, classify_source
from .token import Token
from .types import RawAmount, HumanAmount, TokenTag

#: Only code in this module can construct amounts
_CONSTRUCTION_GUARD = object()

#: Anything that can be coerced to an amount of a known token
AmountLike = Union["TokenAmount", RawAmount, HumanAmount]


def _divide_towards_zero(a: int, b: int) -> int:
    # Python // floors, on-chain integer division truncates
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


@dataclass(frozen=True, eq=False)
class TokenAmount:
    """An exact amount of a token.

    - :py:attr:`number` is always an `int` in the smallest unit of the token

    - Arithmetic returns new instances, only :py:meth:`add_tag` mutates

    - Amounts of different tokens cannot be mixed, see :py:class:`tokenamount.exceptions.TokenMismatch`

    Do not call the constructor directly, use :py:meth:`create`, :py:meth:`resolve`
    or :py:meth:`tokenamount.token.Token.new_amount`.
    """

    #: The token this is an amount of.
    #:
    #: Shared between amounts.
    token: Token

    #: Raw amount, already multiplied by `10**token.decimals`
    number: RawAmount

    #: Free form labels in the order they were added.
    #:
    #: Do not take part in equality.
    tags: list = field(default_factory=list)

    _guard: InitVar[object] = None

    def __init_subclass__(cls, **kwargs):
        raise ConstructionError(f"TokenAmount cannot be subclassed, tried to create {cls.__name__}")

    def __new__(cls, *args, _guard: object = None, **kwargs):
        if _guard is not _CONSTRUCTION_GUARD:
            raise ConstructionError("[TokenAmount] no constructor direct call, use TokenAmount.create(), TokenAmount.resolve() or Token.new_amount()")
        return super().__new__(cls)

    def __post_init__(self, _guard: object):
        if not isinstance(self.token, Token):
            raise ValidationError(f"[TokenAmount] Invalid token provided: {self.token!r}")

        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise ValidationError(f"[TokenAmount] Number must be an integer in raw token units, got {type(self.number)}: {self.number!r}. Use Token.scale_up() for human amounts.")

        if not isinstance(self.tags, (list, tuple)):
            raise ValidationError(f"[TokenAmount] Tags must be a list, got {type(self.tags)}")

        # Own copy, add_tag() appends in place
        object.__setattr__(self, "tags", list(self.tags))

    def __repr__(self):
        return f"<TokenAmount {self.to_display_string()} ({self.number} raw) of {self.token!r}>"

    def __str__(self):
        return self.to_display_string()

    def __int__(self) -> int:
        return self.number

    def __index__(self) -> int:
        return self.number

    def __bool__(self) -> bool:
        return self.number != 0

    def __hash__(self) -> int:
        return hash((self.token.identity_key, self.number))

    def __reduce__(self):
        return (TokenAmount.resolve, (self.to_serializable(),))

    def __eq__(self, other) -> bool:
        """Amounts are equal when they are of the same token and have the same raw number.

        Use :py:meth:`equal` to compare against plain numbers.
        """
        if not isinstance(other, TokenAmount):
            return NotImplemented
        return self.token.is_same_token(other.token) and self.number == other.number

    def __lt__(self, other):
        return self.less_than(other)

    def __le__(self, other):
        return self.less_or_equal(other)

    def __gt__(self, other):
        return self.greater_than(other)

    def __ge__(self, other):
        return self.greater_or_equal(other)

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        # sum() starts from int 0
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, other):
        return self.multiply(other)

    def __truediv__(self, other):
        return self.divide(other)

    def __neg__(self):
        return self.token.new_amount(-self.number)

    def __abs__(self):
        return self.token.new_amount(abs(self.number))

    def _coerce(self, other: AmountLike) -> RawAmount:
        """Get raw units of the other operand in our token."""
        if isinstance(other, TokenAmount):
            if not self.token.is_same_token(other.token):
                raise TokenMismatch(f"Cannot mix amounts of {self.token!r} and {other.token!r}")
            return other.number
        return self.token.new_amount(other).number

    def clone(self) -> "TokenAmount":
        """Copy with its own tag list."""
        return TokenAmount.create(token=self.token, number=self.number, tags=list(self.tags))

    def add_tag(self, tag: TokenTag):
        """Append a label.

        Duplicates are kept.
        """
        self.tags.append(tag)

    def to_display_string(self) -> str:
        """Format for humans, e.g. `USDC 11,111.00`."""
        return self.token.format(self.number)

    def scale_down(self) -> Decimal:
        """Exact human readable value."""
        return self.token.scale_down(self.number)

    def to_serializable(self) -> dict:
        """Plain JSON compatible presentation.

        The raw number is written as a hex `BigNumber` so that JSON consumers
        using doubles do not lose precision.
        """
        return {
            "token": self.token.to_serializable(),
            "number": encode_big_number(self.number),
            "tags": list(self.tags),
        }

    def add(self, other: AmountLike) -> "TokenAmount":
        return self.token.new_amount(self.number + self._coerce(other))

    def subtract(self, other: AmountLike) -> "TokenAmount":
        return self.token.new_amount(self.number - self._coerce(other))

    def multiply(self, other: AmountLike) -> "TokenAmount":
        """Multiply raw numbers.

        Multiplying two amounts compounds the decimal scale:
        3 USDC × 2 USDC is 6,000,000 USDC.
        Use a raw `int` to scale an amount, e.g. `amount.multiply(6)`.
        """
        return self.token.new_amount(self.number * self._coerce(other))

    def divide(self, other: AmountLike) -> "TokenAmount":
        """Integer division, truncates toward zero.

        :raise ZeroDivisionError:
            Divisor is zero
        """
        return self.token.new_amount(_divide_towards_zero(self.number, self._coerce(other)))

    def less_than(self, other: AmountLike) -> bool:
        return self.number < self._coerce(other)

    def less_or_equal(self, other: AmountLike) -> bool:
        return self.number <= self._coerce(other)

    def equal(self, other: AmountLike) -> bool:
        return self.number == self._coerce(other)

    def greater_than(self, other: AmountLike) -> bool:
        return self.number > self._coerce(other)

    def greater_or_equal(self, other: AmountLike) -> bool:
        return self.number >= self._coerce(other)

    # Short names
    sub = subtract
    mul = multiply
    div = divide
    lt = less_than
    lte = less_or_equal
    eq = equal
    gt = greater_than
    gte = greater_or_equal

    @staticmethod
    def create(token: Token, number: RawAmount, tags: Optional[list] = None) -> "TokenAmount":
        """Create an amount from raw token units.

        :param number:
            Raw units as `int`. Scale human readable values first with
            :py:meth:`tokenamount.token.Token.scale_up`, or use
            :py:meth:`tokenamount.token.Token.new_amount`.

        :raise ValidationError:
            Bad token, number or tags
        """
        return TokenAmount(
            token=token,
            number=number,
            tags=[] if tags is None else tags,
            _guard=_CONSTRUCTION_GUARD,
        )

    @staticmethod
    def resolve(source: Union["TokenAmount", Token, Mapping, Any], number: Optional[AmountLike] = None) -> "TokenAmount":
        """Get an amount from whatever presentation we have at hand.

        - :py:class:`TokenAmount`: new amount of the same token, with `number` if given

        - :py:class:`tokenamount.token.Token`: `token.new_amount(number)`

        - Serialised amount with `token` and `number` keys: decoded, `number` overrides the stored value if given

        - Other mapping: treated as token data, then `new_amount(number)`

        .. code-block:: python

            amount = TokenAmount.resolve(loads(dumps(amount)))

        :raise UnsupportedError:
            Contracts and unknown sources
        """
        kind = classify_source(source)

        if kind == SourceKind.token_amount:
            return source.token.new_amount(source if number is None else number)

        if kind == SourceKind.token:
            return source.new_amount(_require_number(number))

        if kind == SourceKind.serialised_amount:
            if classify_source(source["token"]) == SourceKind.contract:
                raise UnsupportedError("Serialised amount cannot refer to a contract")
            token = Token.resolve(source["token"])
            if number is None:
                raw = decode_big_number(source["number"])
            else:
                raw = token.new_amount(number).number
            return TokenAmount.create(token=token, number=raw, tags=source.get("tags") or [])

        if kind == SourceKind.data:
            return Token.resolve(source).new_amount(_require_number(number))

        if kind == SourceKind.contract:
            raise UnsupportedError("Creating token amounts directly from a contract is not yet supported, resolve the Token first")

        raise UnsupportedError(f"Cannot resolve a token amount from {type(source)}")


def _require_number(number: Optional[AmountLike]) -> AmountLike:
    if number is None:
        raise ValidationError("Token amount needs a number")
    return number
