"""Module for custom exceptions.

All errors raised by this package are subclasses of :py:class:`TokenAmountError`.
Some of them also subclass a built-in exception, so that callers
catching `TypeError` or `ValueError` keep working.
"""


class TokenAmountError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)


class ConstructionError(TokenAmountError):
    """Token or amount instance was not created through its factory methods.

    - Calling `Token(...)` or `TokenAmount(...)` directly

    - Subclassing a sealed class
    """


class ValidationError(TokenAmountError, TypeError):
    """Missing required field or a field had a wrong type or value."""


class NativeTokenAddressError(ConstructionError, ValidationError):
    """Native token was given a smart contract address.

    The native currency of a chain, like ETH on Ethereum mainnet, does not
    have a contract address.
    """


class TokenMismatch(ValidationError):
    """Tried to do arithmetic or comparison between amounts of different tokens."""


class ParseError(TokenAmountError, ValueError):
    """Could not parse a human readable or hex encoded number."""


class UnsupportedError(TokenAmountError, NotImplementedError):
    """Source kind is not supported by this operation."""
