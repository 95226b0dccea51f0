"""Token presentation.

Tokens are created through factory methods only:

- :py:meth:`Token.create` from raw metadata

- :py:meth:`Token.create_native` for the native currency of a chain

- :py:meth:`Token.resolve` from deserialised JSON, an existing token or a web3.py contract

Example:

.. code-block:: python

    from tokenamount.token import Token

    usdc = Token.create(
        chain_id=1,
        name="USD Coin",
        symbol="USDC",
        decimals=6,
        address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    )

    amount = usdc.new_amount("11111")
    assert str(amount) == "USDC 11,111.00"
"""
import enum
from dataclasses import dataclass, InitVar, fields
from decimal import Decimal
from types import MappingProxyType
from typing import Optional, Mapping, Awaitable, Union

from dataclasses_json import LetterCase
from eth_utils import is_address

from .chain import normalise_chain_id, get_chain_name
from .config import DEFAULT_FORMAT_CONFIGURATION, FormatConfiguration
from .exceptions import ConstructionError, NativeTokenAddressError, UnsupportedError, ValidationError
from .scaling import expand_to_decimals, contract_from_decimals, format_units
from .source import SourceKind, classify_source, read_contract_metadata
from .types import RawChainId, TokenSymbol, HumanAmount, RawAmount, TokenIdentity, MAX_SAFE_JSON_INTEGER

#: Only code in this module can construct tokens
_CONSTRUCTION_GUARD = object()

#: Address part of the identity key of native tokens
NATIVE_IDENTITY = "native"

#: Fields a token cannot be created without
REQUIRED_FIELDS = ("chain_id", "name", "symbol", "decimals")

#: All fields a serialised token may have, in snake_case
KNOWN_FIELDS = REQUIRED_FIELDS + ("type", "address", "format_symbol", "format_options")


class TokenType(str, enum.Enum):
    """What kind of token this is.

    Values are the strings used in JSON.
    """

    #: Native currency of a chain, like ETH on Ethereum mainnet
    native = "Native"

    #: Fungible ERC-20 token
    erc20 = "ERC20"

    #: Non-fungible ERC-721 token
    erc721 = "ERC721"

    @staticmethod
    def parse(value: Union["TokenType", str]) -> "TokenType":
        """Accept enum members, JSON values or member names."""
        if isinstance(value, TokenType):
            return value

        if isinstance(value, str):
            for member in TokenType:
                if value in (member.value, member.name):
                    return member

        raise ValidationError(f"Unknown token type {value!r}, use one of {[m.value for m in TokenType]}")


@dataclass(frozen=True)
class Token:
    """Token presentation.

    Capture token essentials: identity and display metadata.

    - Immutable

    - Two tokens are equal when all their fields are equal

    - Tokens hash by :py:attr:`identity_key`, so they can be used in sets and as dict keys

    Do not call the constructor directly, it raises :py:class:`ConstructionError`.
    """

    #: Chain id, see :py:class:`tokenamount.chain.ChainId`
    chain_id: RawChainId

    #: ERC-20 name() output
    name: str

    #: ERC-20 symbol() output
    symbol: TokenSymbol

    #: ERC-20 decimals() output
    decimals: int

    #: Native, ERC-20 or ERC-721
    type: TokenType = TokenType.erc20

    #: Smart contract address of this token.
    #:
    #: Kept as given, checksummed or not.
    #: Always `None` for native tokens.
    address: Optional[str] = None

    #: Displayed instead of the symbol when formatting amounts.
    #:
    #: E.g. `Ξ` for ETH.
    format_symbol: Optional[str] = None

    #: Per-token overrides of :py:class:`tokenamount.config.FormatConfiguration`.
    #:
    #: E.g. `{"fractionDigits": 4}`
    #:
    #: Stored as a read-only mapping.
    format_options: Optional[Mapping] = None

    _guard: InitVar[object] = None

    def __init_subclass__(cls, **kwargs):
        raise ConstructionError(f"Token cannot be subclassed, tried to create {cls.__name__}")

    def __new__(cls, *args, _guard: object = None, **kwargs):
        # Checked before __init__ so that any argument combination fails the same way
        if _guard is not _CONSTRUCTION_GUARD:
            raise ConstructionError("[Token] no constructor direct call, use Token.create(), Token.create_native() or Token.resolve()")
        return super().__new__(cls)

    def __post_init__(self, _guard: object):
        # Frozen dataclass, normalise fields in place
        object.__setattr__(self, "chain_id", normalise_chain_id(self.chain_id))
        object.__setattr__(self, "type", TokenType.parse(self.type))

        if not isinstance(self.name, str):
            raise ValidationError(f"Token name must be a string, got {self.name!r}")

        if not isinstance(self.symbol, str):
            raise ValidationError(f"Token symbol must be a string, got {self.symbol!r}")

        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int):
            raise ValidationError(f"Token decimals must be an integer, got {self.decimals!r}")

        if self.decimals < 0:
            raise ValidationError(f"Token decimals must be non-negative, got {self.decimals}")

        if self.is_native:
            if self.address:
                raise NativeTokenAddressError(f"Native token {self.symbol} cannot have an address, got {self.address}")
            object.__setattr__(self, "address", None)
        else:
            if not isinstance(self.address, str) or not is_address(self.address):
                raise ValidationError(f"{self.type.value} token {self.symbol} needs a valid address, got {self.address!r}")

        if self.format_symbol is not None and not isinstance(self.format_symbol, str):
            raise ValidationError(f"format_symbol must be a string, got {self.format_symbol!r}")

        if self.format_options is not None:
            if not isinstance(self.format_options, Mapping):
                raise ValidationError(f"format_options must be a mapping, got {self.format_options!r}")
            object.__setattr__(self, "format_options", MappingProxyType(dict(self.format_options)))

        # Fails early on bad format options
        object.__setattr__(self, "_format_configuration", DEFAULT_FORMAT_CONFIGURATION.with_options(self.format_options))

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.to_serializable() == other.to_serializable()

    def __hash__(self) -> int:
        """Implemented for set()"""
        return hash(self.identity_key)

    def __reduce__(self):
        # copy and pickle go through the factory, the constructor is closed
        return (Token.resolve, (self.to_serializable(),))

    def __repr__(self):
        where = "native" if self.is_native else f"at {self.address}"
        return f"<Token {self.symbol} {where} on {get_chain_name(self.chain_id)} with {self.decimals} decimals>"

    @property
    def is_native(self) -> bool:
        """Is this the native currency of the chain."""
        return self.type == TokenType.native

    @property
    def identity_key(self) -> TokenIdentity:
        """Identity of this token when aggregating amounts.

        `(chain_id, lowercased address)` or `(chain_id, "native")`.
        """
        if self.is_native:
            return (self.chain_id, NATIVE_IDENTITY)
        return (self.chain_id, self.address.lower())

    @property
    def format_configuration(self) -> FormatConfiguration:
        """Display settings with this token's overrides applied."""
        return self._format_configuration

    def is_same_token(self, other: "Token") -> bool:
        """Do two token objects present the same on-chain token.

        Display metadata, like :py:attr:`format_symbol`, may differ.
        """
        return self.identity_key == other.identity_key

    def get_display_symbol(self) -> str:
        """Symbol used when formatting amounts."""
        return self.format_symbol or self.symbol or self.name or self.format_configuration.placeholder_symbol

    def format(self, number: RawAmount, decimals: Optional[int] = None) -> str:
        """Format raw token units for humans.

        .. code-block:: python

            assert usdc.format(11_111_000_000) == "USDC 11,111.00"
            assert usdc.format(-1_000_000) == "-USDC 1.00"

        :param number:
            Raw amount in the smallest unit

        :param decimals:
            Use different decimals than the token has
        """
        if decimals is None:
            decimals = self.decimals

        config = self.format_configuration
        formatted = format_units(number, decimals, fraction_digits=config.fraction_digits, grouping=config.grouping)
        symbol = self.get_display_symbol()

        if formatted.startswith("-"):
            return f"-{symbol} {formatted[1:]}"
        return f"{symbol} {formatted}"

    def scale_up(self, value: HumanAmount, decimals: Optional[int] = None) -> RawAmount:
        """Convert a human readable amount to raw token units.

        See :py:func:`tokenamount.scaling.expand_to_decimals`.

        :raise ParseError:
            On malformed numbers
        """
        if decimals is None:
            decimals = self.decimals
        return expand_to_decimals(value, decimals)

    def scale_down(self, number: RawAmount, decimals: Optional[int] = None) -> Decimal:
        """Convert raw token units to an exact human readable decimal."""
        if decimals is None:
            decimals = self.decimals
        return contract_from_decimals(number, decimals)

    def to_serializable(self) -> dict:
        """Plain JSON compatible presentation.

        - Keys are camelCase

        - `address` and unset optional fields are left out

        - `chainId` is a decimal string if it does not fit in an IEEE double
        """
        data = {LetterCase.CAMEL(f.name): getattr(self, f.name) for f in fields(self)}
        data["type"] = self.type.value

        if self.format_options is not None:
            data["formatOptions"] = dict(self.format_options)

        if abs(self.chain_id) > MAX_SAFE_JSON_INTEGER:
            data["chainId"] = str(self.chain_id)

        return {k: v for k, v in data.items() if v is not None}

    def new_amount(self, value: Union["TokenAmount", RawAmount, HumanAmount]) -> "TokenAmount":
        """Create an amount of this token.

        - `TokenAmount`: its raw units are copied

        - `int`: raw units, used as is

        - `str`, `float`, `Decimal`: human readable amount, scaled up with :py:meth:`scale_up`

        .. code-block:: python

            assert usdc.new_amount(1_000_000) == usdc.new_amount("1")
        """
        from .amount import TokenAmount

        if isinstance(value, TokenAmount):
            number = value.number
        elif isinstance(value, bool):
            raise ValidationError(f"Cannot create a token amount from boolean {value!r}")
        elif isinstance(value, int):
            number = value
        elif isinstance(value, (str, float, Decimal)):
            number = self.scale_up(value)
        else:
            raise ValidationError(f"Cannot create a token amount from {type(value)}: {value!r}")

        return TokenAmount.create(token=self, number=number)

    @staticmethod
    def create(
        chain_id: RawChainId,
        name: str,
        symbol: TokenSymbol,
        decimals: int,
        type: TokenType | str = TokenType.erc20,
        address: Optional[str] = None,
        format_symbol: Optional[str] = None,
        format_options: Optional[Mapping] = None,
    ) -> "Token":
        """Create a token from raw metadata.

        :raise ValidationError:
            Missing or badly typed fields

        :raise NativeTokenAddressError:
            Native token was given an address
        """
        return Token(
            chain_id=chain_id,
            name=name,
            symbol=symbol,
            decimals=decimals,
            type=type,
            address=address,
            format_symbol=format_symbol,
            format_options=format_options,
            _guard=_CONSTRUCTION_GUARD,
        )

    @staticmethod
    def create_native(
        chain_id: RawChainId,
        symbol: TokenSymbol,
        name: Optional[str] = None,
        decimals: int = 18,
        address: Optional[str] = None,
        format_symbol: Optional[str] = None,
        format_options: Optional[Mapping] = None,
    ) -> "Token":
        """Create a token for the native currency of a chain.

        .. code-block:: python

            eth = Token.create_native(chain_id=1, symbol="ETH", name="Ether", format_symbol="Ξ")

        :param name:
            Defaults to the symbol

        :raise NativeTokenAddressError:
            If an address is given
        """
        return Token.create(
            chain_id=chain_id,
            name=symbol if name is None else name,
            symbol=symbol,
            decimals=decimals,
            type=TokenType.native,
            address=address,
            format_symbol=format_symbol,
            format_options=format_options,
        )

    @staticmethod
    def resolve(source: Union["Token", Mapping, object], defaults: Optional[Mapping] = None) -> Union["Token", Awaitable["Token"]]:
        """Get a token from whatever presentation we have at hand.

        - :py:class:`Token`: returned as is, `defaults` are not applied

        - web3.py `Contract` or `AsyncContract`: returns an awaitable, see :py:meth:`from_contract`

        - Mapping, like deserialised JSON: `defaults` are merged under it

        .. code-block:: python

            token = Token.resolve(loads(data), defaults={"chainId": 1})
            token = await Token.resolve(contract, defaults={"chainId": 1})

        :param defaults:
            Fields used when the source does not have them

        :raise UnsupportedError:
            Unknown source type
        """
        kind = classify_source(source)

        if kind == SourceKind.token:
            return source

        if kind == SourceKind.contract:
            return Token.from_contract(source, defaults)

        if kind == SourceKind.data:
            merged = _normalise_keys(defaults or {})
            merged.update(_normalise_keys(source))
            return Token._from_data(merged)

        raise UnsupportedError(f"Cannot resolve a token from {kind.value} source {type(source)}")

    @staticmethod
    async def from_contract(contract, defaults: Optional[Mapping] = None) -> "Token":
        """Create a token from an ERC-20 contract.

        Reads `name()`, `decimals()` and `symbol()` concurrently, then the address.
        The contract has no chain id, so it must be given in `defaults`.

        :param contract:
            web3.py `Contract` or `AsyncContract`
        """
        metadata = await read_contract_metadata(contract)
        data = _normalise_keys(defaults or {})
        data.update(
            name=metadata.name,
            symbol=metadata.symbol,
            decimals=metadata.decimals,
            address=metadata.address,
        )
        return Token._from_data(data)

    @staticmethod
    def _from_data(data: dict) -> "Token":
        # Data written by other tools may not carry a name
        if "name" not in data and "symbol" in data:
            data["name"] = data["symbol"]

        missing = [f for f in REQUIRED_FIELDS if f not in data]
        if missing:
            raise ValidationError(f"Token data is missing fields {missing}: {data}")

        return Token.create(**data)


def _normalise_keys(data: Mapping) -> dict:
    """Turn camelCase JSON keys to snake_case arguments.

    Keys starting with underscore are bookkeeping written by other tools and are dropped.
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"Token data must be a mapping, got {type(data)}")

    result = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise ValidationError(f"Token field names must be strings, got {key!r}")
        if key.startswith("_"):
            continue
        snake_key = LetterCase.SNAKE(key)
        if snake_key not in KNOWN_FIELDS:
            raise ValidationError(f"Unknown token field {key!r}, known fields are {KNOWN_FIELDS}")
        result[snake_key] = value
    return result
