"""Generic units used in token and amount data models.

Types aliases are used to give human-readable meaning for various arguments and return values.
"""
from decimal import Decimal
from typing import TypeAlias, Union, Hashable


#: Chain id that is not a wrapped enum.
#:
#: See :py:class:`tokenamount.chain.ChainId` for details
RawChainId: TypeAlias = int


#: Token symbol is the ERC-20 symbol() output.
#:
#:
#: E.g. `USDC`
#:
TokenSymbol: TypeAlias = str


#: Human readable token quantity, before decimal scaling.
#:
#: E.g. `"1.5"` USDC, `0.99` USDC or `Decimal("11111")` USDC.
#:
#: Floats are accepted as a convenience, but they are converted
#: through their shortest string representation and never multiplied.
#:
HumanAmount: TypeAlias = Union[str, float, Decimal]


#: Raw token amount in the smallest unit of the token.
#:
#: E.g. `1_000_000` for 1 USDC with 6 decimals.
#:
RawAmount: TypeAlias = int


#: Opaque label attached to a token amount.
#:
#: E.g. `"fee"` or `("position", 4)`.
#:
TokenTag: TypeAlias = Hashable


#: Identity of a token when aggregating amounts.
#:
#: `(chain id, lowercased address)` or `(chain id, "native")`.
#:
TokenIdentity: TypeAlias = tuple[RawChainId, str]


#: Largest integer a JSON consumer using IEEE doubles can read back without precision loss.
#:
#: Chain ids outside this range are written as decimal strings.
#:
MAX_SAFE_JSON_INTEGER = 2**53 - 1
