"""Classify inputs of the `resolve()` factories and read token metadata from contracts.

`Token.resolve()` and `TokenAmount.resolve()` accept values from
different origins: already constructed objects, live web3.py contract
handles and deserialised JSON. We first classify the input with
:py:func:`classify_source` and then dispatch on :py:class:`SourceKind`.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from web3.contract import AsyncContract, Contract

logger = logging.getLogger(__name__)


class SourceKind(enum.Enum):
    """What kind of value was passed to a `resolve()` factory."""

    #: Already constructed :py:class:`tokenamount.token.Token`
    token = "token"

    #: Already constructed :py:class:`tokenamount.amount.TokenAmount`
    token_amount = "token_amount"

    #: web3.py `Contract` or `AsyncContract`
    contract = "contract"

    #: Serialised token amount: a mapping with `token` and `number` keys
    serialised_amount = "serialised_amount"

    #: Any other mapping, treated as token data
    data = "data"

    #: Nothing we know how to handle
    unknown = "unknown"


def classify_source(source: Any) -> SourceKind:
    """Tell what kind of value we are resolving from."""

    # Late import, token and amount modules depend on this module
    from .amount import TokenAmount
    from .token import Token

    if isinstance(source, Token):
        return SourceKind.token

    if isinstance(source, TokenAmount):
        return SourceKind.token_amount

    if isinstance(source, (Contract, AsyncContract)):
        return SourceKind.contract

    if isinstance(source, Mapping):
        if "token" in source and "number" in source:
            return SourceKind.serialised_amount
        return SourceKind.data

    return SourceKind.unknown


@dataclass(frozen=True)
class ContractMetadata:
    """ERC-20 metadata read from a token smart contract."""

    address: str

    name: str

    symbol: str

    decimals: int


async def _call(contract: Contract | AsyncContract, function_name: str):
    bound = getattr(contract.functions, function_name)()
    if isinstance(contract, AsyncContract):
        return await bound.call()
    # Blocking JSON-RPC call, keep the event loop free
    return await asyncio.to_thread(bound.call)


async def read_contract_metadata(contract: Contract | AsyncContract) -> ContractMetadata:
    """Read ERC-20 metadata of a token contract.

    `name()`, `decimals()` and `symbol()` are queried concurrently.
    Any transport error is passed to the caller as is.

    :param contract:
        web3.py contract bound to an ERC-20 ABI
    """
    name, decimals, symbol = await asyncio.gather(
        _call(contract, "name"),
        _call(contract, "decimals"),
        _call(contract, "symbol"),
    )

    address = contract.address

    logger.debug("Read token metadata %s (%s) with %d decimals at %s", name, symbol, decimals, address)

    return ContractMetadata(
        address=address,
        name=name,
        symbol=symbol,
        decimals=int(decimals),
    )
